"""
docscript Native-Handler Bundle Loader

Native scripts are zip archives of Python code. Every bundle referenced by a
document joins one import namespace, so modules in one bundle can import
modules from another. Each bundle declares its entry points in a Java-style
manifest (META-INF/MANIFEST.MF):

    Script-Handler: charts.handler:ChartHandler
    SVG-Handler-Class: charts.listeners.Initializer

Key classes:
- EntryPointRole: The two recognised entry-point roles
- BundleNamespace: Meta-path finder over all bundle archives
- NativeHandlerBundle: Namespace plus entry points keyed by bundle URL
"""

from __future__ import annotations

import importlib
import importlib.abc
import logging
import shutil
import sys
import tempfile
import zipfile
import zipimport
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from docscript.constants import (
    EVENT_LISTENER_INITIALIZER_KEY,
    MANIFEST_PATH,
    SCRIPT_HANDLER_KEY,
)
from docscript.errors import BundleMetadataError, NativeHandlerError, ResourceUnavailableError
from docscript.runtime.urls import URLOpener, resolve_url

logger = logging.getLogger(__name__)


class EntryPointRole(Enum):
    SCRIPT_HANDLER = SCRIPT_HANDLER_KEY
    EVENT_LISTENER_INITIALIZER = EVENT_LISTENER_INITIALIZER_KEY


class ScriptHandler(Protocol):
    def run(self, document: Any, window: Any) -> None: ...


class EventListenerInitializer(Protocol):
    def initialize_event_listeners(self, document: Any) -> None: ...


def parse_manifest(text: str) -> Dict[str, str]:
    """
    Parse the main section of a manifest.

    Lines are 'Name: value'; a line starting with a single space continues
    the previous value. The main section ends at the first blank line.

    Raises:
        ValueError: On a line that is neither a header nor a continuation
    """
    attributes: Dict[str, str] = {}
    last: Optional[str] = None
    for lineno, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            break
        if line.startswith(" "):
            if last is None:
                raise ValueError(f"line {lineno}: continuation without a header")
            attributes[last] += line[1:]
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"line {lineno}: expected 'Name: value'")
        last = name.strip()
        attributes[last] = value.strip()
    return attributes


class _BundleFinder(importlib.abc.MetaPathFinder):
    """Finds top-level modules in any bundle; submodules resolve through package __path__."""

    def __init__(self, importers: List[zipimport.zipimporter]):
        self._importers = importers

    def find_spec(self, fullname, path, target=None):
        if path is not None:
            return None
        for importer in self._importers:
            spec = importer.find_spec(fullname)
            if spec is not None:
                return spec
        return None


class BundleNamespace:
    """
    One import namespace spanning several bundle archives.

    The finder is appended to sys.meta_path, so installed packages and the
    standard library win over bundle modules of the same name.
    """

    def __init__(self, archives: Iterable[Path]):
        self.archives = [Path(p) for p in archives]
        self._finder = _BundleFinder([zipimport.zipimporter(str(p)) for p in self.archives])
        self.installed = False

    def install(self) -> None:
        if not self.installed:
            sys.meta_path.append(self._finder)
            self.installed = True

    def uninstall(self) -> None:
        """Remove the finder and forget every module imported from the bundles."""
        if self.installed:
            sys.meta_path.remove(self._finder)
            self.installed = False
        prefixes = tuple(str(p) for p in self.archives)
        if not prefixes:
            return
        for name, module in list(sys.modules.items()):
            origin = getattr(module, "__file__", None)
            if origin and origin.startswith(prefixes):
                del sys.modules[name]

    def load_class(self, name: str) -> Any:
        """Resolve 'pkg.module:Class' or 'pkg.module.Class'."""
        if ":" in name:
            module_name, _, attr_path = name.partition(":")
        else:
            module_name, _, attr_path = name.rpartition(".")
        if not module_name or not attr_path:
            raise ImportError(f"Invalid entry point name '{name}'")
        obj = importlib.import_module(module_name)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
        return obj

    def __enter__(self) -> "BundleNamespace":
        self.install()
        return self

    def __exit__(self, *exc) -> None:
        self.uninstall()


@dataclass
class NativeHandlerBundle:
    """Bundles of one document load, discarded after the load pass."""
    source_urls: List[str]
    base_url: Optional[str]
    namespace: BundleNamespace
    entry_points: Dict[EntryPointRole, Dict[str, str]] = field(default_factory=dict)
    workdir: Optional[Path] = None

    def entry_point(self, bundle_url: str, role: EntryPointRole) -> Optional[str]:
        return self.entry_points.get(role, {}).get(bundle_url)

    def instantiate(self, name: str) -> Any:
        """Load the named class from the namespace and create an instance."""
        try:
            cls = self.namespace.load_class(name)
            return cls()
        except Exception as e:
            raise NativeHandlerError(name, e) from e

    def close(self) -> None:
        self.namespace.uninstall()
        if self.workdir is not None:
            shutil.rmtree(self.workdir, ignore_errors=True)
            self.workdir = None


def load_bundles(urls: Iterable[str], base_url: Optional[str],
                 opener: URLOpener, reporter: Any) -> NativeHandlerBundle:
    """
    Fetch bundles, read their manifests and build the shared namespace.

    A bundle that cannot be fetched, is not an archive, or has a missing or
    malformed manifest is reported; its siblings still load.

    Args:
        urls: Bundle URLs in document order (duplicates are ignored)
        base_url: Document base URL for relative references
        opener: URL facility used to materialise remote bundles
        reporter: Error channel (display_error)

    Returns:
        NativeHandlerBundle with the namespace installed
    """
    workdir = Path(tempfile.mkdtemp(prefix="docscript-bundles-"))
    source_urls: List[str] = []
    archives: List[Path] = []
    entry_points: Dict[EntryPointRole, Dict[str, str]] = {role: {} for role in EntryPointRole}

    for url in dict.fromkeys(resolve_url(base_url or "", u) for u in urls):
        source_urls.append(url)
        try:
            path = opener.fetch_to_path(url, workdir)
        except ResourceUnavailableError as e:
            reporter.display_error(e)
            continue

        try:
            archive = zipfile.ZipFile(path)
        except (zipfile.BadZipFile, OSError) as e:
            reporter.display_error(BundleMetadataError(url, f"not a bundle archive ({e})"))
            continue
        archives.append(path)

        with archive:
            try:
                raw = archive.read(MANIFEST_PATH)
            except KeyError:
                reporter.display_error(BundleMetadataError(url, f"missing {MANIFEST_PATH}"))
                continue

        try:
            manifest = parse_manifest(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            reporter.display_error(BundleMetadataError(url, str(e)))
            continue

        for role in EntryPointRole:
            name = manifest.get(role.value)
            if name:
                entry_points[role][url] = name
        logger.debug("Bundle %s entry points: %s", url,
                     {r.value: entry_points[r].get(url) for r in EntryPointRole})

    namespace = BundleNamespace(archives)
    namespace.install()
    return NativeHandlerBundle(
        source_urls=source_urls,
        base_url=base_url,
        namespace=namespace,
        entry_points=entry_points,
        workdir=workdir,
    )
