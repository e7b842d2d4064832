"""
docscript configuration

Key classes:
- ScriptOrigin: Which script origins the default policy accepts
- ScriptingConfig: Validated settings for one scripting environment

The configuration is a JSON document; load_config() reads it from an explicit
path or from the file named by the DOCSCRIPT_CONFIG environment variable.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from docscript.constants import (
    DEFAULT_SCRIPT_TYPE,
    NATIVE_SCRIPT_TYPE,
    PYTHON_SCRIPT_TYPES,
)
from docscript.errors import ConfigError

CONFIG_ENV_VAR = "DOCSCRIPT_CONFIG"


class ScriptOrigin(str, Enum):
    """Allowed script origins, from most to least permissive."""
    ANY = "any"
    DOCUMENT = "document"
    EMBEDDED = "embedded"
    NONE = "none"


def _default_allowed_types() -> List[str]:
    return [
        DEFAULT_SCRIPT_TYPE,
        "application/ecmascript",
        *PYTHON_SCRIPT_TYPES,
        NATIVE_SCRIPT_TYPE,
    ]


class ScriptingConfig(BaseModel):
    """Settings for a ScriptingEnvironment."""
    default_script_type: str = DEFAULT_SCRIPT_TYPE
    native_script_type: str = NATIVE_SCRIPT_TYPE
    script_origin: ScriptOrigin = ScriptOrigin.DOCUMENT
    # None allows every script type
    allowed_script_types: Optional[List[str]] = Field(default_factory=_default_allowed_types)
    svg12: Optional[bool] = None
    http_timeout: float = Field(default=30.0, gt=0)
    log_level: str = "WARNING"

    def is_allowed_type(self, script_type: str) -> bool:
        if self.allowed_script_types is None:
            return True
        return script_type in self.allowed_script_types


def load_config(path: Union[str, Path, None] = None) -> ScriptingConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Config file; defaults to $DOCSCRIPT_CONFIG, then built-in defaults

    Returns:
        Validated ScriptingConfig

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return ScriptingConfig()

    config_path = Path(path)
    try:
        with open(config_path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e

    try:
        return ScriptingConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e
