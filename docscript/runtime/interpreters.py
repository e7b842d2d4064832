"""
docscript Interpreter protocol and pool

Key classes:
- Interpreter: What the scripting core needs from a language implementation
- ScriptEventWrapper: Events that carry a language-specific event object
- InterpreterPool: Language id -> interpreter factory mapping
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, TextIO, runtime_checkable

from docscript.constants import DOCUMENT_NAME, PYTHON_SCRIPT_TYPES

logger = logging.getLogger(__name__)


class Interpreter(Protocol):
    """
    A live interpreter for one scripting language.

    evaluate raises InterpreterException on evaluation failure and
    ScriptSecurityError (kind SANDBOX_VIOLATION) when the language's own
    sandbox rejects the script.
    """

    def bind_object(self, name: str, value: Any) -> None: ...

    def evaluate(self, source: TextIO, description: Optional[str] = None) -> Any: ...


@runtime_checkable
class ScriptEventWrapper(Protocol):
    def get_event_object(self) -> Any: ...


InterpreterFactory = Callable[[], Interpreter]


class InterpreterPool:
    """
    Creates interpreters by language id.

    Every interpreter it creates has the document bound under 'document'
    before it is handed out.
    """

    def __init__(self, factories: Optional[Dict[str, InterpreterFactory]] = None):
        self._factories: Dict[str, InterpreterFactory] = dict(factories or {})

    def register(self, language: str, factory: InterpreterFactory) -> None:
        self._factories[language] = factory

    def unregister(self, language: str) -> None:
        self._factories.pop(language, None)

    @property
    def languages(self) -> List[str]:
        return sorted(self._factories)

    def create_interpreter(self, document: Any, language: str) -> Optional[Interpreter]:
        factory = self._factories.get(language)
        if factory is None:
            return None
        interpreter = factory()
        interpreter.bind_object(DOCUMENT_NAME, document)
        logger.debug("Created interpreter for language=%s", language)
        return interpreter


def default_interpreter_pool() -> InterpreterPool:
    """Pool with the sandboxed Python interpreter registered for the Python script types."""
    from docscript.runtime.python_interpreter import PythonInterpreter

    pool = InterpreterPool()
    for language in PYTHON_SCRIPT_TYPES:
        pool.register(language, PythonInterpreter)
    return pool
