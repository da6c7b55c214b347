"""File operation utilities for safe filename handling and JSON documents."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional


def safe_filename(name: str, default: str = 'file', max_length: Optional[int] = None) -> str:
    """Create a safe filename from a user-provided name.

    Keeps alphanumeric characters, underscores and hyphens, turns spaces
    into underscores and collapses repeats.

    Example:
        >>> safe_filename("ana.souza@example.com")
        'anasouzaexamplecom'
        >>> safe_filename("", default="user")
        'user'
    """
    if not name:
        return default

    cleaned = ''.join(c for c in name if c.isalnum() or c in {' ', '_', '-'})
    cleaned = cleaned.strip().replace(' ', '_')

    while '__' in cleaned:
        cleaned = cleaned.replace('__', '_')

    if max_length is not None and len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    cleaned = cleaned.rstrip('_')

    return cleaned if cleaned else default


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json_atomic(target: Path, payload: Any) -> None:
    """Replace ``target`` with ``payload`` as JSON in a single rename.

    Readers see either the old document or the new one, never a partial
    write.
    """
    ensure_directory(target.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix='.tmp', dir=str(target.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
