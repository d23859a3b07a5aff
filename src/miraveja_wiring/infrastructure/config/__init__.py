"""Settings for the wiring index."""

from .loader import WiringSettings, load_settings
from .models import LoggingConfig

__all__ = [
    "WiringSettings",
    "LoggingConfig",
    "load_settings",
]
