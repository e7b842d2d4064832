"""
docscript Window

The global binding object exposed to scripts under 'window'. Timers,
dialogs, XML parsing and URL fetches are no-ops here; hosting environments
subclass Window (and override ScriptingEnvironment.create_window) to provide
real behaviour.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, Union

if TYPE_CHECKING:
    from docscript.runtime.environment import ScriptingEnvironment
    from docscript.runtime.interpreters import Interpreter

TimerCallback = Union[str, Callable[[], Any]]
URLResponseHandler = Callable[[bool, Optional[str], Optional[str]], Any]


class Window:
    """Window object of a scripting environment."""

    _guarded_writes = True

    def __init__(self, environment: Optional["ScriptingEnvironment"] = None,
                 interpreter: Optional["Interpreter"] = None,
                 language: Optional[str] = None):
        self.environment = environment
        self.interpreter = interpreter
        self.language = language

    def set_interval(self, script: TimerCallback, interval: float) -> Any:
        return None

    def clear_interval(self, interval: Any) -> None:
        pass

    def set_timeout(self, script: TimerCallback, timeout: float) -> Any:
        return None

    def clear_timeout(self, timeout: Any) -> None:
        pass

    def parse_xml(self, text: str, document: Any = None) -> Any:
        """Parse text into a fragment of document; always None here."""
        return None

    def get_url(self, uri: str, handler: URLResponseHandler, encoding: str = "UTF-8") -> None:
        pass

    def post_url(self, uri: str, content: str, handler: URLResponseHandler,
                 mime_type: str = "text/plain", encoding: Optional[str] = None) -> None:
        pass

    def alert(self, message: str) -> None:
        pass

    def confirm(self, message: str) -> bool:
        return False

    def prompt(self, message: str, default: Optional[str] = None) -> Optional[str]:
        return None

    def __repr__(self) -> str:
        return f"<Window language={self.language!r}>"
