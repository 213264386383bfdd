"""Resolve browser polyfills with feature tests and content-hashed paths."""

from .config import load_config
from .errors import ConfigError, MinifyError, PolyfillConfigError, PolyfillFileError
from .models import PolyfillFile, PolyfillRequest, PolyfillsData, PolyfillsLoaderConfig
from .resolver import resolve_polyfills

__all__ = [
    "ConfigError",
    "MinifyError",
    "PolyfillConfigError",
    "PolyfillFile",
    "PolyfillFileError",
    "PolyfillRequest",
    "PolyfillsData",
    "PolyfillsLoaderConfig",
    "load_config",
    "resolve_polyfills",
]
