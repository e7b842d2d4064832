"""Test fixtures for docscript v1.1 test suite."""
import pytest
import sys
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from docscript.config import ScriptingConfig, ScriptOrigin
from docscript.constants import MANIFEST_PATH
from docscript.governance.reporting import LoggingErrorReporter
from docscript.runtime.interpreters import InterpreterPool
from docscript.runtime.python_interpreter import PythonInterpreter

PYTHON = "text/python"

SVG_OPEN = (
    '<svg xmlns="http://www.w3.org/2000/svg" '
    'xmlns:xlink="http://www.w3.org/1999/xlink"{attrs}>'
)


def svg(body: str = "", **attrs: str) -> str:
    """Wrap body in an SVG root element carrying attrs."""
    rendered = "".join(f' {name}="{value}"' for name, value in attrs.items())
    return SVG_OPEN.format(attrs=rendered) + body + "</svg>"


def make_bundle(path: Path, files: Dict[str, str], manifest: Optional[str] = None) -> Path:
    """Write a native-handler bundle archive."""
    with zipfile.ZipFile(path, "w") as zf:
        if manifest is not None:
            zf.writestr(MANIFEST_PATH, manifest)
        for name, source in files.items():
            zf.writestr(name, source)
    return path


class RecordingInterpreter:
    """Interpreter double that records bindings and evaluated sources."""

    def __init__(self, fail_on: Optional[Dict[str, BaseException]] = None):
        self.bindings: Dict[str, Any] = {}
        self.bind_calls: List[Tuple[str, Any]] = []
        self.evaluated: List[Tuple[str, Optional[str]]] = []
        self.fail_on = fail_on or {}
        self.disposed = False

    def bind_object(self, name: str, value: Any) -> None:
        self.bindings[name] = value
        self.bind_calls.append((name, value))

    def evaluate(self, source, description=None):
        text = source.read()
        self.evaluated.append((text, description))
        error = self.fail_on.get(text.strip())
        if error is not None:
            raise error
        return None

    def dispose(self) -> None:
        self.disposed = True

    @property
    def sources(self) -> List[str]:
        return [text.strip() for text, _ in self.evaluated]


@pytest.fixture
def reporter() -> LoggingErrorReporter:
    """Error reporter that keeps records."""
    return LoggingErrorReporter()


@pytest.fixture
def relaxed_config() -> ScriptingConfig:
    """Configuration accepting scripts from any origin."""
    return ScriptingConfig(script_origin=ScriptOrigin.ANY)


@pytest.fixture
def script_log() -> List[Any]:
    """List bound as 'log' into every Python session."""
    return []


@pytest.fixture
def python_pool(script_log: List[Any]) -> InterpreterPool:
    """Pool of sandboxed Python interpreters that can append to script_log."""
    return InterpreterPool({PYTHON: lambda: PythonInterpreter({"log": script_log})})


@pytest.fixture
def recording_interpreter() -> RecordingInterpreter:
    return RecordingInterpreter()


@pytest.fixture
def recording_pool(recording_interpreter: RecordingInterpreter) -> InterpreterPool:
    """Pool whose text/python factory always returns the same recording interpreter."""
    return InterpreterPool({PYTHON: lambda: recording_interpreter})


@pytest.fixture
def doc_url() -> str:
    return "http://example.com/charts/doc.svg"
