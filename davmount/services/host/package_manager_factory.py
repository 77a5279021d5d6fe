"""Package Manager Factory - detects the host's package manager."""

import logging
from typing import List, Optional

from .base_package_manager import BasePackageManager
from .command_runner import CommandRunner
from .package_managers import DEFAULT_PACKAGE_MANAGERS
from ...core.exceptions import HostEnvironmentError

logger = logging.getLogger(__name__)


class UnsupportedPackageManagerError(HostEnvironmentError):
    """Raised when none of the known package managers is present."""
    pass


class PackageManagerFactory:
    """Picks the first available package manager. SRP: detection ONLY."""

    def __init__(self, runner: CommandRunner, managers: Optional[List[BasePackageManager]] = None):
        self._runner = runner
        self._managers = list(DEFAULT_PACKAGE_MANAGERS if managers is None else managers)

    def register(self, manager: BasePackageManager) -> None:
        """Add a manager to the end of the probe list."""
        self._managers.append(manager)

    def detect(self) -> BasePackageManager:
        for manager in self._managers:
            if self._runner.command_exists(manager.probe_binary):
                logger.debug(f"Detected package manager: {manager.get_name()}")
                return manager

        tried = ", ".join(m.probe_binary for m in self._managers)
        raise UnsupportedPackageManagerError(f"no package manager found (tried {tried})")
