"""Per-user davfs2 configuration directory (``~/.davfs2``)."""

import logging
from pathlib import Path
from typing import List

from .host import HostUser
from .secrets_store import SecretsFile
from ..config import Settings
from ..utils.line_store import append_unique_line, ensure_directory, ensure_file

logger = logging.getLogger(__name__)

CONFIG_DIR_MODE = 0o700
CONF_FILE_MODE = 0o600

NO_LOCKS_OPTION = "use_locks 0"
TRUST_SERVER_CERT_OPTION = "trust_server_cert 1"


class UserDavfsConfig:
    """The ``.davfs2`` directory of one local user."""

    def __init__(self, user: HostUser, settings: Settings):
        self.user = user
        self.config_dir = Path(user.home) / settings.user_config_dirname
        self.secrets = SecretsFile(
            self.config_dir / settings.user_secrets_filename, uid=user.uid, gid=user.gid
        )
        self.conf_path = self.config_dir / settings.user_conf_filename

    async def ensure_layout(self) -> None:
        """Create the config directory and secrets file with user-only permissions."""
        await ensure_directory(self.config_dir, CONFIG_DIR_MODE, self.user.uid, self.user.gid)
        await self.secrets.ensure_exists()

    async def apply_overrides(self, no_locks: bool = False, insecure_tls: bool = False) -> List[str]:
        """
        Ensure the requested option lines are in ``davfs2.conf``.

        Other lines in the file are never touched. Returns the lines that
        were added on this call.
        """
        wanted = []
        if no_locks:
            wanted.append(NO_LOCKS_OPTION)
        if insecure_tls:
            wanted.append(TRUST_SERVER_CERT_OPTION)
        if not wanted:
            return []

        await ensure_file(self.conf_path, CONF_FILE_MODE, self.user.uid, self.user.gid)

        added = []
        for line in wanted:
            if await append_unique_line(self.conf_path, line):
                added.append(line)
        if added:
            logger.info(f"{self.conf_path}: added {', '.join(added)}")
        return added
