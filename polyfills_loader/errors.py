"""Exceptions raised while resolving polyfills."""

from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration cannot be parsed or is incomplete."""


class PolyfillConfigError(ConfigError):
    """Raised when a polyfill request lacks a name or a source path."""


class PolyfillFileError(RuntimeError):
    """Raised when a polyfill source cannot be read or processed."""


class MinifyError(PolyfillFileError):
    """Raised when the minifier produced no usable output."""


__all__ = ["ConfigError", "MinifyError", "PolyfillConfigError", "PolyfillFileError"]
