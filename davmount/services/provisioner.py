"""Provisioner - sets up davfs2 WebDAV mounts for local users."""

import logging
from pathlib import Path
from typing import Callable, List, Mapping, Optional

import aiofiles.os

from .credentials import CredentialService
from .host import HostAccounts, HostUser, MountHelperInstaller
from .mount_table import MountTable, build_mount_options
from .secrets_store import SecretsFile
from .user_config import UserDavfsConfig
from ..config import Settings
from ..models import MountMapping, MountTableEntry, ProvisionRequest, SecretRecord
from ..utils.line_store import ensure_directory

logger = logging.getLogger(__name__)

MOUNT_DIR_MODE = 0o750


class Provisioner:
    """
    Runs one provisioning pass over a validated request.

    Mappings are processed in input order. A failure stops the run; mappings
    already processed stay applied and a re-run with the same input picks up
    where it stopped.
    """

    def __init__(
        self,
        settings: Settings,
        accounts: HostAccounts,
        installer: MountHelperInstaller,
        environ: Optional[Mapping[str, str]] = None,
        prompt_fn: Optional[Callable[[str], str]] = None,
    ):
        self._settings = settings
        self._accounts = accounts
        self._installer = installer
        self._environ = environ
        self._prompt_fn = prompt_fn
        self._mount_table = MountTable(Path(settings.fstab_path))
        self._system_secrets = SecretsFile(Path(settings.system_secrets_path))

    async def provision(self, request: ProvisionRequest) -> List[MountTableEntry]:
        self._accounts.require_root()

        # Resolve every local user up front so a typo fails before anything is written
        users = {m.local_user: self._accounts.get_user(m.local_user) for m in request.mappings}

        await self._installer.ensure_installed()

        credentials = CredentialService(
            request.env_var_by_remote_user, environ=self._environ, prompt_fn=self._prompt_fn
        )

        await aiofiles.os.makedirs(self._settings.system_config_dir, exist_ok=True)
        await self._system_secrets.ensure_exists()

        entries = []
        for mapping in request.mappings:
            entry = await self._provision_mapping(
                request, mapping, users[mapping.local_user], credentials
            )
            entries.append(entry)

        logger.info(f"Done. {len(entries)} mount(s) configured")
        return entries

    async def _provision_mapping(
        self,
        request: ProvisionRequest,
        mapping: MountMapping,
        user: HostUser,
        credentials: CredentialService,
    ) -> MountTableEntry:
        user_url = request.user_url(mapping.remote_user)
        password = credentials.resolve_credential(mapping.remote_user)

        await self._accounts.ensure_group_membership(user, self._settings.davfs_group)
        await ensure_directory(Path(mapping.mount_path), MOUNT_DIR_MODE, user.uid, user.gid)

        user_config = UserDavfsConfig(user, self._settings)
        await user_config.ensure_layout()

        record = SecretRecord(url=user_url, remote_user=mapping.remote_user, password=password)
        await user_config.secrets.upsert(record)

        if request.system_secrets:
            await self._system_secrets.upsert(record)

        await user_config.apply_overrides(
            no_locks=request.no_locks, insecure_tls=request.insecure_tls
        )

        options = build_mount_options(
            request.mode,
            user.uid,
            user.gid,
            idle_timeout_seconds=self._settings.automount_idle_timeout_seconds,
        )
        entry = MountTableEntry(url=user_url, mount_path=mapping.mount_path, options=options)
        await self._mount_table.upsert(entry)

        logger.info(f"Configured {mapping.mount_path} → {user_url} (as {user.name})")
        return entry
