"""
docscript Error Reporting

The single channel through which element-scoped and pass-scoped failures are
surfaced to the host.

Key classes:
- ErrorRecord: One reported error with its ErrorKind
- ErrorReporter: Protocol for host error display
- LoggingErrorReporter: Default reporter; logs and keeps records
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from docscript.errors import ErrorKind, classify_error

logger = logging.getLogger(__name__)


@dataclass
class ErrorRecord:
    """A reported error."""
    kind: ErrorKind
    message: str
    exception_type: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "exception_type": self.exception_type,
            "timestamp": self.timestamp,
        }


class ErrorReporter(Protocol):
    def display_error(self, exc: BaseException) -> None: ...

    def display_message(self, message: str) -> None: ...


class LoggingErrorReporter:
    """
    Reporter that logs every error and keeps an in-memory record of it.

    Hosts with a user-visible error display wrap or replace this class.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.records: List[ErrorRecord] = []
        self.messages: List[str] = []

    def display_error(self, exc: BaseException) -> None:
        kind = classify_error(exc)
        record = ErrorRecord(
            kind=kind,
            message=str(exc),
            exception_type=type(exc).__name__,
        )
        self.records.append(record)
        self.log.error("%s: %s", kind.value, exc)

    def display_message(self, message: str) -> None:
        self.messages.append(message)
        self.log.info("%s", message)

    def by_kind(self, kind: ErrorKind) -> List[ErrorRecord]:
        return [r for r in self.records if r.kind == kind]

    def clear(self) -> None:
        self.records.clear()
        self.messages.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errors": [r.to_dict() for r in self.records],
            "messages": list(self.messages),
        }
