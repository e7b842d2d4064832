"""Smoke tests for docscript v1.1 modules."""
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


class TestModuleImports:
    """Basic import tests for all modules."""

    def test_import_package(self):
        """Test the top-level package exports."""
        import docscript
        assert docscript.__version__ == "1.1.0"
        assert docscript.ScriptingEnvironment is not None
        assert docscript.is_dynamic_document is not None

    def test_import_runtime(self):
        """Test runtime modules import."""
        from docscript.runtime import (
            LifecycleDispatcher,
            NativeHandlerBundle,
            ScriptLoader,
            SessionRegistry,
        )
        assert LifecycleDispatcher is not None
        assert NativeHandlerBundle is not None
        assert ScriptLoader is not None
        assert SessionRegistry is not None

    def test_import_governance(self):
        """Test governance modules import."""
        from docscript.governance import LoggingErrorReporter, ScriptSecurityPolicy
        assert LoggingErrorReporter is not None
        assert ScriptSecurityPolicy is not None

    def test_import_cli(self):
        """Test the CLI group imports."""
        from docscript.cli import main
        assert set(main.commands) == {"classify", "scripts", "run"}
