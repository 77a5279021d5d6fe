"""Host Accounts - user and group database access."""

import grp
import logging
import os
import pwd
from dataclasses import dataclass

from .command_runner import CommandRunner
from ...core.exceptions import PrivilegeError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostUser:
    name: str
    uid: int
    gid: int
    home: str


class HostAccounts:
    """Looks up and edits UNIX users and groups. SRP: account database ONLY."""

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    def require_root(self) -> None:
        euid = os.geteuid()
        if euid != 0:
            raise PrivilegeError(euid)

    def get_user(self, name: str) -> HostUser:
        """Resolve ``name`` in the passwd database."""
        try:
            entry = pwd.getpwnam(name)
        except KeyError:
            raise ValidationError(f"local user {name} missing")
        return HostUser(name=entry.pw_name, uid=entry.pw_uid, gid=entry.pw_gid, home=entry.pw_dir)

    def group_exists(self, group: str) -> bool:
        try:
            grp.getgrnam(group)
        except KeyError:
            return False
        return True

    def is_member(self, user: HostUser, group: str) -> bool:
        """True if ``group`` is the user's primary or a supplementary group."""
        try:
            entry = grp.getgrnam(group)
        except KeyError:
            return False
        return entry.gr_gid == user.gid or user.name in entry.gr_mem

    async def ensure_group_membership(self, user: HostUser, group: str) -> bool:
        """Create ``group`` if needed and add ``user`` to it. Returns True if the user was added."""
        if not self.group_exists(group):
            await self._runner.run(["groupadd", group])
            logger.info(f"Created group {group}")

        if self.is_member(user, group):
            return False

        await self._runner.run(["usermod", "-aG", group, user.name])
        logger.info(f"Added {user.name} to {group}")
        return True
