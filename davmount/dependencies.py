from functools import lru_cache
from typing import Dict, Any

from .config import Settings
from .services.host import (
    CommandRunner,
    HostAccounts,
    MountHelperInstaller,
    PackageManagerFactory,
)
from .services.provisioner import Provisioner

# Global singleton instances
_singletons: Dict[str, Any] = {}


@lru_cache
def get_settings() -> Settings:
    """Hent Settings singleton instance."""
    return Settings()


def get_command_runner() -> CommandRunner:
    if "command_runner" not in _singletons:
        _singletons["command_runner"] = CommandRunner(
            timeout_seconds=get_settings().command_timeout_seconds
        )
    return _singletons["command_runner"]


def get_host_accounts() -> HostAccounts:
    if "host_accounts" not in _singletons:
        _singletons["host_accounts"] = HostAccounts(get_command_runner())
    return _singletons["host_accounts"]


def get_package_manager_factory() -> PackageManagerFactory:
    if "package_manager_factory" not in _singletons:
        _singletons["package_manager_factory"] = PackageManagerFactory(get_command_runner())
    return _singletons["package_manager_factory"]


def get_mount_helper_installer() -> MountHelperInstaller:
    if "mount_helper_installer" not in _singletons:
        settings = get_settings()
        _singletons["mount_helper_installer"] = MountHelperInstaller(
            runner=get_command_runner(),
            factory=get_package_manager_factory(),
            helper_binary=settings.mount_helper_binary,
            package_name=settings.package_name,
        )
    return _singletons["mount_helper_installer"]


def get_provisioner() -> Provisioner:
    if "provisioner" not in _singletons:
        _singletons["provisioner"] = Provisioner(
            settings=get_settings(),
            accounts=get_host_accounts(),
            installer=get_mount_helper_installer(),
        )
    return _singletons["provisioner"]


def reset_singletons() -> None:
    """Reset all singletons - bruges i tests."""
    _singletons.clear()
    get_settings.cache_clear()
