"""
Host Module

Everything that touches the host outside of plain file edits:

- CommandRunner: subprocess execution
- HostAccounts: user/group database lookups and edits
- BasePackageManager + concrete strategies: one per distribution family
- PackageManagerFactory: ordered detection over the strategy list
- MountHelperInstaller: installs davfs2 when mount.davfs is missing
"""

from .accounts import HostAccounts, HostUser
from .base_package_manager import BasePackageManager
from .command_runner import CommandResult, CommandRunner
from .mount_helper import MountHelperInstaller
from .package_manager_factory import PackageManagerFactory, UnsupportedPackageManagerError

__all__ = [
    "HostAccounts",
    "HostUser",
    "BasePackageManager",
    "CommandResult",
    "CommandRunner",
    "MountHelperInstaller",
    "PackageManagerFactory",
    "UnsupportedPackageManagerError",
]
