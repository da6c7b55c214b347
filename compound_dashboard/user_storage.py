"""Persistence of the per-user document (scenarios, progress and ledger).

One JSON file per user id.  Saving replaces the whole document; there is
no merging or versioning, so concurrent saves for the same user resolve
as last write wins.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Optional

from .config import USERS_DIR, ensure_data_directories
from .file_operations import ensure_directory, safe_filename, write_json_atomic
from .models import UserData

logger = logging.getLogger(__name__)


def normalize_user_id(user_id: str) -> str:
    """Lower-cased, stripped user id.

    Raises:
        ValueError: If the id is blank
    """
    normalized = (user_id or '').strip().lower()
    if not normalized:
        raise ValueError("User id cannot be empty")
    return normalized


class UserDataStore:
    """Reads and writes user documents under a directory."""

    def __init__(self, users_dir: Optional[Path] = None):
        """Initialize the store.

        Args:
            users_dir: Optional custom directory for user documents.
                       Defaults to USERS_DIR from config.
        """
        self.users_dir = Path(users_dir) if users_dir is not None else USERS_DIR
        if users_dir is None:
            ensure_data_directories()
        ensure_directory(self.users_dir)

    def get_path(self, user_id: str) -> Path:
        """File for ``user_id``.

        The readable prefix is sanitized and can collide (``a.b@x`` and
        ``ab@x``); the hash suffix keeps the names apart.
        """
        normalized = normalize_user_id(user_id)
        digest = hashlib.sha1(normalized.encode('utf-8')).hexdigest()[:10]
        return self.users_dir / f"{safe_filename(normalized, default='user', max_length=60)}_{digest}.json"

    def exists(self, user_id: str) -> bool:
        return self.get_path(user_id).exists()

    def load_user_data(self, user_id: str) -> UserData:
        """Load a user's document; missing or unreadable files give an empty one."""
        target = self.get_path(user_id)
        if not target.exists():
            return UserData()
        try:
            with target.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read user document %s: %s", target.name, exc)
            return UserData()
        return UserData.from_dict(data)

    def save_user_data(self, user_id: str, data: UserData) -> None:
        """Replace the user's stored document with ``data``."""
        target = self.get_path(user_id)
        write_json_atomic(target, data.to_dict())
        logger.debug("Saved user document %s", target.name)


def load_user_data(user_id: str, users_dir: Optional[Path] = None) -> UserData:
    return UserDataStore(users_dir).load_user_data(user_id)


def save_user_data(user_id: str, data: UserData, users_dir: Optional[Path] = None) -> None:
    UserDataStore(users_dir).save_user_data(user_id, data)
