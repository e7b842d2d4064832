"""
docscript Language Session Registry

Owns at most one interpreter session per scripting language for the life of
one scripting environment.

Key classes:
- LanguageSession: Interpreter plus its initialised global binding object
- Available / Unavailable: Result of a session lookup
- SessionRegistry: Lazily creates and initialises sessions exactly once
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Union

from docscript.runtime.interpreters import Interpreter

logger = logging.getLogger(__name__)

InterpreterProvider = Callable[[str], Optional[Interpreter]]
SessionInitializer = Callable[[Interpreter, str], Any]


@dataclass
class LanguageSession:
    """A live interpreter and the global object bound into it."""
    language: str
    interpreter: Interpreter
    global_object: Any


@dataclass(frozen=True)
class Available:
    session: LanguageSession


@dataclass(frozen=True)
class Unavailable:
    language: str


SessionLookup = Union[Available, Unavailable]


class SessionRegistry:
    """
    Registry of language sessions.

    provider asks the host for an interpreter (None when the language is not
    supported); initializer binds the global object into a new interpreter and
    returns it. Neither is called twice for the same language.
    """

    def __init__(self, provider: InterpreterProvider, initializer: SessionInitializer):
        self._provider = provider
        self._initializer = initializer
        self._sessions: Dict[str, LanguageSession] = {}
        self._attempted: Set[str] = set()

    def lookup(self, language: str) -> SessionLookup:
        session = self._sessions.get(language)
        if session is not None:
            return Available(session)

        if language in self._attempted:
            # Already warned for this language
            return Unavailable(language)

        self._attempted.add(language)
        interpreter = self._provider(language)
        if interpreter is None:
            logger.warning("No interpreter available for script language '%s'; "
                           "its scripts will be skipped", language)
            return Unavailable(language)

        global_object = self._initializer(interpreter, language)
        session = LanguageSession(language, interpreter, global_object)
        self._sessions[language] = session
        logger.debug("Initialised session for language=%s", language)
        return Available(session)

    def get_session(self, language: str) -> Optional[LanguageSession]:
        result = self.lookup(language)
        if isinstance(result, Available):
            return result.session
        return None

    @property
    def languages(self) -> List[str]:
        """Every language id looked up so far, supported or not."""
        return sorted(self._attempted)

    @property
    def sessions(self) -> Dict[str, LanguageSession]:
        return dict(self._sessions)

    def close(self) -> None:
        """Dispose every interpreter and forget all sessions."""
        for session in self._sessions.values():
            dispose = getattr(session.interpreter, "dispose", None)
            if callable(dispose):
                dispose()
        self._sessions.clear()
        self._attempted.clear()
