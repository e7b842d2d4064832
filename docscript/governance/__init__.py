"""
docscript Governance Module

Security policy consulted before scripts run, and the error-reporting
channel every failure flows through.
"""

from docscript.governance.policy import (
    DefaultScriptSecurity,
    EmbeddedScriptSecurity,
    NoLoadScriptSecurity,
    RelaxedScriptSecurity,
    ScriptSecurity,
    ScriptSecurityPolicy,
    SecurityPolicy,
)
from docscript.governance.reporting import ErrorRecord, ErrorReporter, LoggingErrorReporter

__all__ = [
    "DefaultScriptSecurity",
    "EmbeddedScriptSecurity",
    "NoLoadScriptSecurity",
    "RelaxedScriptSecurity",
    "ScriptSecurity",
    "ScriptSecurityPolicy",
    "SecurityPolicy",
    "ErrorRecord",
    "ErrorReporter",
    "LoggingErrorReporter",
]
