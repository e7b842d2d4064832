"""
docscript URL facility

Resolves script references against base URIs and opens them as streams.
Supported schemes: file (and bare paths), data, http and https (httpx).
Every failure surfaces as ResourceUnavailableError.
"""

from __future__ import annotations

import base64
import io
import logging
from pathlib import Path
from typing import Optional, TextIO
from urllib.parse import unquote_to_bytes, urljoin, urlparse
from urllib.request import url2pathname

import httpx

from docscript.errors import ResourceUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 30.0


def resolve_url(base: str, href: str) -> str:
    """Resolve href against base; an empty href yields base itself."""
    if not href:
        return base
    if not base:
        return href
    return urljoin(base, href)


def url_to_path(url: str) -> Optional[Path]:
    """Local path for file: URLs and bare paths, else None."""
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    if parsed.scheme == "" or (len(parsed.scheme) == 1 and url[1:2] == ":"):
        return Path(url)
    return None


def _decode_data_url(url: str) -> bytes:
    header, sep, payload = url[len("data:"):].partition(",")
    if not sep:
        raise ValueError("data URL without ','")
    if header.endswith(";base64"):
        return base64.b64decode(payload)
    return unquote_to_bytes(payload)


class URLOpener:
    """Opens URLs synchronously; the calling thread blocks until the read completes."""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.timeout = timeout
        self._client = client

    def _http_get(self, url: str) -> httpx.Response:
        if self._client is not None:
            response = self._client.get(url, timeout=self.timeout, follow_redirects=True)
        else:
            response = httpx.get(url, timeout=self.timeout, follow_redirects=True)
        response.raise_for_status()
        return response

    def read_bytes(self, url: str) -> bytes:
        try:
            scheme = urlparse(url).scheme
            if scheme == "data":
                return _decode_data_url(url)
            if scheme in ("http", "https"):
                return self._http_get(url).content
            path = url_to_path(url)
            if path is None:
                raise ValueError(f"unsupported scheme '{scheme}'")
            return path.read_bytes()
        except (OSError, ValueError, httpx.HTTPError, httpx.InvalidURL) as e:
            raise ResourceUnavailableError(url, str(e)) from e

    def open_text(self, url: str, encoding: str = "utf-8") -> TextIO:
        """Open url as a text stream."""
        if urlparse(url).scheme in ("http", "https"):
            try:
                response = self._http_get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise ResourceUnavailableError(url, str(e)) from e
            return io.StringIO(response.text)
        data = self.read_bytes(url)
        try:
            return io.StringIO(data.decode(encoding))
        except UnicodeDecodeError as e:
            raise ResourceUnavailableError(url, str(e)) from e

    def fetch_to_path(self, url: str, directory: Path) -> Path:
        """Local file holding url's content; local files are used in place."""
        path = url_to_path(url)
        if path is not None:
            try:
                found = path.is_file()
            except OSError as e:
                raise ResourceUnavailableError(url, str(e)) from e
            if not found:
                raise ResourceUnavailableError(url, "no such file")
            return path
        data = self.read_bytes(url)
        try:
            target = directory / f"{len(list(directory.iterdir()))}.zip"
            target.write_bytes(data)
        except OSError as e:
            raise ResourceUnavailableError(url, str(e)) from e
        logger.debug("Fetched %s to %s", url, target)
        return target
