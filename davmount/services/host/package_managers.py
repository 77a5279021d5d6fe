"""Concrete package manager strategies, one per supported distribution family."""

from typing import Dict, List

from .base_package_manager import BasePackageManager


class AptPackageManager(BasePackageManager):
    """Debian / Ubuntu."""

    probe_binary = "apt-get"

    def install_commands(self, package: str) -> List[List[str]]:
        return [
            ["apt-get", "update", "-y"],
            ["apt-get", "install", "-y", package],
        ]

    def install_env(self) -> Dict[str, str]:
        # davfs2 asks a debconf question on install
        return {"DEBIAN_FRONTEND": "noninteractive"}


class DnfPackageManager(BasePackageManager):
    """Fedora / RHEL 8+."""

    probe_binary = "dnf"

    def install_commands(self, package: str) -> List[List[str]]:
        return [["dnf", "install", "-y", package]]


class YumPackageManager(BasePackageManager):
    """CentOS / RHEL 7."""

    probe_binary = "yum"

    def install_commands(self, package: str) -> List[List[str]]:
        return [["yum", "install", "-y", package]]


class ApkPackageManager(BasePackageManager):
    """Alpine."""

    probe_binary = "apk"

    def install_commands(self, package: str) -> List[List[str]]:
        return [["apk", "add", "--no-cache", package]]


class PacmanPackageManager(BasePackageManager):
    """Arch."""

    probe_binary = "pacman"

    def install_commands(self, package: str) -> List[List[str]]:
        return [["pacman", "-Sy", "--noconfirm", package]]


# Probed in order; the first manager found wins
DEFAULT_PACKAGE_MANAGERS: List[BasePackageManager] = [
    AptPackageManager(),
    DnfPackageManager(),
    YumPackageManager(),
    ApkPackageManager(),
    PacmanPackageManager(),
]
