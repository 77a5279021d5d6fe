"""Abstract Package Manager - interface for installing the mount helper."""

from abc import ABC, abstractmethod
from typing import Dict, List


class BasePackageManager(ABC):
    """One host package manager: how to detect it and how to install with it."""

    #: binary whose presence on PATH identifies this manager
    probe_binary: str = ""

    def get_name(self) -> str:
        """Get package manager name for logging."""
        return self.probe_binary

    @abstractmethod
    def install_commands(self, package: str) -> List[List[str]]:
        """Commands to run, in order, to install ``package``."""
        pass

    def install_env(self) -> Dict[str, str]:
        """Extra environment for the install commands."""
        return {}
