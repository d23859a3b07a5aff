"""Pydantic configuration models.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_settings()
2. Environment variables (MIRAVEJA_WIRING__SECTION__KEY)
3. YAML file (.miraveja-wiring.yaml, or an explicit path)
4. Built-in defaults (this file and AnnotationTable)

Examples:
    MIRAVEJA_WIRING__LOGGING__LEVEL=DEBUG
    MIRAVEJA_WIRING__LOGGING__FORMAT=json
    MIRAVEJA_WIRING__ANNOTATIONS__INJECTION_MARKERS='["com.google.inject.Inject"]'
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MIRAVEJA_WIRING__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        MIRAVEJA_WIRING__LOGGING__FORMAT: console or json
        MIRAVEJA_WIRING__LOGGING__DESTINATION: stderr, stdout or an absolute file path
    """

    level: LogLevel = Field(default="INFO", description="Root log level.")
    format: Literal["json", "console"] = "console"
    destination: str = "stderr"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if isinstance(v, str) else v

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)
