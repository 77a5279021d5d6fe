"""
davfs2 secrets files.

Each credential line is ``url  user  password``. davfs2 reads these fields
whitespace-separated, with backslash escapes and double quotes for
characters that would otherwise split or end a field; fields are written
escaped so a password with spaces or ``#`` round-trips through davfs2.
"""

import logging
import re
import shlex
from pathlib import Path
from typing import Optional, Tuple

from ..models import SecretRecord
from ..utils.line_store import ensure_file, upsert_line

logger = logging.getLogger(__name__)

SECRETS_FILE_MODE = 0o600
FIELD_SEPARATOR = "  "

_NEEDS_ESCAPE = re.compile(r'([\\"#\s])')


def escape_field(value: str) -> str:
    return _NEEDS_ESCAPE.sub(r"\\\1", value)


def format_secret_line(record: SecretRecord) -> str:
    return FIELD_SEPARATOR.join(
        escape_field(field) for field in (record.url, record.remote_user, record.password)
    )


def secret_line_key(line: str) -> Optional[Tuple[str, str]]:
    """``(url, user)`` for a credential line, None for comments and blanks."""
    try:
        fields = shlex.split(line, comments=True)
    except ValueError:
        # Unbalanced quotes; davfs2 would reject it too, leave it alone
        return None
    if len(fields) < 2:
        return None
    return fields[0], fields[1]


class SecretsFile:
    """One davfs2 secrets file (per-user or system-wide)."""

    def __init__(self, path: Path, uid: Optional[int] = None, gid: Optional[int] = None):
        self.path = Path(path)
        self._uid = uid
        self._gid = gid

    async def ensure_exists(self) -> None:
        await ensure_file(self.path, SECRETS_FILE_MODE, self._uid, self._gid)

    async def upsert(self, record: SecretRecord) -> bool:
        """Store ``record``, replacing any line with the same url and user."""
        await self.ensure_exists()
        changed = await upsert_line(self.path, secret_line_key, format_secret_line(record))
        if changed:
            logger.debug(f"Stored credentials for {record.remote_user} @ {record.url} in {self.path}")
        return changed
