"""
Tests for package manager detection and mount helper installation.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from davmount.core.exceptions import CommandFailedError, HostEnvironmentError
from davmount.services.host import (
    CommandRunner,
    MountHelperInstaller,
    PackageManagerFactory,
    UnsupportedPackageManagerError,
)
from davmount.services.host.base_package_manager import BasePackageManager
from davmount.services.host.package_managers import (
    AptPackageManager,
    PacmanPackageManager,
)


def runner_with(available):
    runner = Mock(spec=CommandRunner)
    runner.command_exists = Mock(side_effect=lambda name: name in available)
    runner.run = AsyncMock()
    return runner


class ZypperPackageManager(BasePackageManager):
    probe_binary = "zypper"

    def install_commands(self, package):
        return [["zypper", "--non-interactive", "install", package]]


class TestPackageManagerFactory:
    def test_first_available_wins(self):
        factory = PackageManagerFactory(runner_with({"dnf", "yum"}))
        assert factory.detect().get_name() == "dnf"

    def test_apt_preferred(self):
        factory = PackageManagerFactory(runner_with({"pacman", "apt-get"}))
        assert isinstance(factory.detect(), AptPackageManager)

    def test_none_found(self):
        factory = PackageManagerFactory(runner_with(set()))

        with pytest.raises(UnsupportedPackageManagerError, match="no package manager found"):
            factory.detect()

    def test_none_found_is_environment_error(self):
        factory = PackageManagerFactory(runner_with(set()))

        with pytest.raises(HostEnvironmentError):
            factory.detect()

    def test_register_extends_probe_list(self):
        factory = PackageManagerFactory(runner_with({"zypper"}))
        factory.register(ZypperPackageManager())

        assert factory.detect().get_name() == "zypper"


class TestPackageManagerCommands:
    def test_apt_updates_first_and_is_noninteractive(self):
        apt = AptPackageManager()

        assert apt.install_commands("davfs2") == [
            ["apt-get", "update", "-y"],
            ["apt-get", "install", "-y", "davfs2"],
        ]
        assert apt.install_env() == {"DEBIAN_FRONTEND": "noninteractive"}

    def test_pacman(self):
        assert PacmanPackageManager().install_commands("davfs2") == [
            ["pacman", "-Sy", "--noconfirm", "davfs2"]
        ]


class TestMountHelperInstaller:
    @pytest.mark.asyncio
    async def test_present_helper_skips_install(self):
        runner = runner_with({"mount.davfs", "apt-get"})
        installer = MountHelperInstaller(runner, PackageManagerFactory(runner))

        assert await installer.ensure_installed() is False
        runner.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_installs_with_detected_manager(self):
        runner = runner_with({"apt-get"})
        installer = MountHelperInstaller(runner, PackageManagerFactory(runner))

        assert await installer.ensure_installed() is True

        commands = [call.args[0] for call in runner.run.call_args_list]
        assert commands == [
            ["apt-get", "update", "-y"],
            ["apt-get", "install", "-y", "davfs2"],
        ]
        assert runner.run.call_args.kwargs["env"] == {"DEBIAN_FRONTEND": "noninteractive"}

    @pytest.mark.asyncio
    async def test_install_failure_propagates(self):
        runner = runner_with({"dnf"})
        runner.run.side_effect = CommandFailedError(["dnf", "install", "-y", "davfs2"], 1, "boom")
        installer = MountHelperInstaller(runner, PackageManagerFactory(runner))

        with pytest.raises(HostEnvironmentError, match="boom"):
            await installer.ensure_installed()

    @pytest.mark.asyncio
    async def test_no_manager_found(self):
        runner = runner_with(set())
        installer = MountHelperInstaller(runner, PackageManagerFactory(runner))

        with pytest.raises(UnsupportedPackageManagerError):
            await installer.ensure_installed()
