"""Minification of polyfill sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import rjsmin

from .errors import MinifyError


@dataclass(frozen=True)
class MinifyResult:
    """Outcome of a minification run; ``code`` is None on failure."""

    code: Optional[str]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code is not None


def minify(content: str) -> MinifyResult:
    """Minify JavaScript source. No source map is produced."""
    try:
        code = rjsmin.jsmin(content)
    except (TypeError, ValueError) as exc:
        return MinifyResult(code=None, error=str(exc))
    if not isinstance(code, str):
        return MinifyResult(code=None, error="minifier returned no output")
    if content.strip() and not code.strip():
        return MinifyResult(code=None, error="minifier returned empty output")
    return MinifyResult(code=code)


def minify_or_raise(content: str, *, name: str) -> str:
    """Return minified content or raise :class:`MinifyError` naming the polyfill."""
    result = minify(content)
    if not result.ok:
        raise MinifyError(f"Failed to minify polyfill {name}: {result.error}")
    return result.code  # type: ignore[return-value]


__all__ = ["MinifyResult", "minify", "minify_or_raise"]
