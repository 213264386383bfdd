"""Write resolved polyfills to an output directory."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional

from .errors import PolyfillFileError
from .logging import get_logger
from .models import PolyfillFile, PolyfillsData

MANIFEST_FILENAME = "polyfills.json"

_logger = get_logger("writer")


def write_polyfills(data: PolyfillsData, out_dir: Path) -> List[Path]:
    """Write each polyfill at its web path below ``out_dir`` plus a JSON manifest.

    Returns the written file paths, manifest last.
    """
    files = ([data.core_js] if data.core_js is not None else []) + list(data.polyfill_files)
    written: List[Path] = []
    for polyfill in files:
        target = _target_path(out_dir, polyfill.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(polyfill.content, encoding="utf-8")
        _logger.debug("Wrote %s", target)
        written.append(target)

    manifest_path = out_dir / MANIFEST_FILENAME
    out_dir.mkdir(parents=True, exist_ok=True)
    manifest_path.write_text(
        json.dumps(build_manifest(data), indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    written.append(manifest_path)
    _logger.info("Wrote %d polyfill file(s) to %s", len(files), out_dir)
    return written


def build_manifest(data: PolyfillsData, *, include_content: bool = False) -> Dict[str, object]:
    """Return a JSON-serialisable description of ``data``."""
    return {
        "core_js": _file_entry(data.core_js, include_content),
        "polyfill_files": [_file_entry(f, include_content) for f in data.polyfill_files],
    }


def _file_entry(
    polyfill: Optional[PolyfillFile], include_content: bool
) -> Optional[Dict[str, object]]:
    if polyfill is None:
        return None
    entry = asdict(polyfill)
    if not include_content:
        entry.pop("content", None)
    return entry


def _target_path(out_dir: Path, web_path: str) -> Path:
    relative = PurePosixPath(web_path)
    if relative.is_absolute() or ".." in relative.parts:
        raise PolyfillFileError(f"Refusing to write polyfill outside {out_dir}: {web_path}")
    return out_dir.joinpath(*relative.parts)


__all__ = ["MANIFEST_FILENAME", "build_manifest", "write_polyfills"]
