"""Mount Helper Installer - makes sure mount.davfs is available."""

import logging

from .command_runner import CommandRunner
from .package_manager_factory import PackageManagerFactory

logger = logging.getLogger(__name__)


class MountHelperInstaller:
    """Installs the davfs2 package when its mount helper is missing."""

    def __init__(
        self,
        runner: CommandRunner,
        factory: PackageManagerFactory,
        helper_binary: str = "mount.davfs",
        package_name: str = "davfs2",
    ):
        self._runner = runner
        self._factory = factory
        self._helper_binary = helper_binary
        self._package_name = package_name

    def is_installed(self) -> bool:
        return self._runner.command_exists(self._helper_binary)

    async def ensure_installed(self) -> bool:
        """Returns True if an install was performed."""
        if self.is_installed():
            logger.info(f"{self._package_name} present")
            return False

        manager = self._factory.detect()
        logger.info(f"Installing {self._package_name} with {manager.get_name()}...")

        for command in manager.install_commands(self._package_name):
            await self._runner.run(command, env=manager.install_env())

        logger.info(f"Installed {self._package_name}")
        return True
