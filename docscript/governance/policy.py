"""
docscript Script Security Policy

The security check consulted before any script byte runs. A policy raises
ScriptSecurityError from check_load_script to deny a script.

Key classes:
- RelaxedScriptSecurity: Any origin
- DefaultScriptSecurity: Same host as the document, or embedded
- EmbeddedScriptSecurity: Only scripts embedded in the document
- NoLoadScriptSecurity: Nothing
- ScriptSecurityPolicy: Picks one of the above from ScriptingConfig
"""

from __future__ import annotations

from typing import Optional, Protocol
from urllib.parse import urlparse

from docscript.config import ScriptingConfig, ScriptOrigin
from docscript.constants import NATIVE_SCRIPT_TYPE
from docscript.errors import ScriptSecurityError

DATA_PROTOCOL = "data"


def _is_data_url(url: Optional[str]) -> bool:
    return bool(url) and urlparse(url).scheme == DATA_PROTOCOL


def _strip_fragment(url: str) -> str:
    return url.split("#", 1)[0]


class SecurityPolicy(Protocol):
    def check_load_script(self, script_type: str, script_url: Optional[str],
                          document_url: Optional[str]) -> None: ...


class ScriptSecurity:
    """A decision about one (type, script URL, document URL) triple."""

    def __init__(self, script_type: str, script_url: Optional[str],
                 document_url: Optional[str], native_script_type: str = NATIVE_SCRIPT_TYPE):
        self.script_type = script_type
        self.script_url = script_url
        self.document_url = document_url
        self.native_script_type = native_script_type

    def check_load_script(self) -> None:
        raise NotImplementedError


class RelaxedScriptSecurity(ScriptSecurity):
    def check_load_script(self) -> None:
        return None


class NoLoadScriptSecurity(ScriptSecurity):
    def check_load_script(self) -> None:
        raise ScriptSecurityError(
            f"Scripts of type '{self.script_type}' may not be loaded "
            f"(script {self.script_url}, document {self.document_url})"
        )


class DefaultScriptSecurity(ScriptSecurity):
    """Allow scripts from the document's host, data: URLs and embedded scripts."""

    def check_load_script(self) -> None:
        if not self.document_url:
            raise ScriptSecurityError("Cannot access the document URL")

        doc_host = urlparse(self.document_url).hostname
        script_host = urlparse(self.script_url or "").hostname
        if doc_host == script_host:
            return
        if _is_data_url(self.script_url):
            return
        raise ScriptSecurityError(
            f"Script from {self.script_url} is not allowed in document {self.document_url}"
        )


class EmbeddedScriptSecurity(ScriptSecurity):
    """
    Allow only scripts embedded in the document itself or data: URLs.

    Native bundles run unsandboxed, so a data: URL is not enough for them.
    """

    def check_load_script(self) -> None:
        if _is_data_url(self.script_url) and self.script_type != self.native_script_type:
            return
        if (self.script_url and self.document_url
                and _strip_fragment(self.script_url) == _strip_fragment(self.document_url)):
            return
        raise ScriptSecurityError(
            f"Only embedded scripts are allowed; refused {self.script_url}"
        )


_ORIGIN_SECURITY = {
    ScriptOrigin.ANY: RelaxedScriptSecurity,
    ScriptOrigin.DOCUMENT: DefaultScriptSecurity,
    ScriptOrigin.EMBEDDED: EmbeddedScriptSecurity,
    ScriptOrigin.NONE: NoLoadScriptSecurity,
}


class ScriptSecurityPolicy:
    """
    User-agent style policy.

    A script type outside config.allowed_script_types is always refused;
    otherwise config.script_origin selects the security rule.
    """

    def __init__(self, config: Optional[ScriptingConfig] = None):
        self.config = config or ScriptingConfig()

    def get_script_security(self, script_type: str, script_url: Optional[str],
                            document_url: Optional[str]) -> ScriptSecurity:
        if not self.config.is_allowed_type(script_type):
            return NoLoadScriptSecurity(script_type, script_url, document_url)
        security_cls = _ORIGIN_SECURITY[self.config.script_origin]
        return security_cls(script_type, script_url, document_url,
                            self.config.native_script_type)

    def check_load_script(self, script_type: str, script_url: Optional[str],
                          document_url: Optional[str]) -> None:
        """Raise ScriptSecurityError if the script may not be loaded."""
        security = self.get_script_security(script_type, script_url, document_url)
        security.check_load_script()
