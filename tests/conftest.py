"""
Pytest configuration og shared fixtures.
"""

import os
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from davmount.config import Settings
from davmount.dependencies import reset_singletons
from davmount.services.host import HostAccounts, HostUser, MountHelperInstaller


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset singletons before hver test."""
    reset_singletons()
    yield
    reset_singletons()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every system file into tmp_path."""
    etc = tmp_path / "etc"
    etc.mkdir()
    (etc / "fstab").write_text("proc  /proc  proc  defaults  0  0\n")
    return Settings(
        fstab_path=str(etc / "fstab"),
        system_config_dir=str(etc / "davfs2"),
        system_secrets_path=str(etc / "davfs2" / "secrets"),
        log_file_path="",
    )


@pytest.fixture
def make_user(tmp_path: Path):
    """Build HostUser records owned by the test process so chown is a no-op."""

    def _make(name: str) -> HostUser:
        return HostUser(
            name=name,
            uid=os.getuid(),
            gid=os.getgid(),
            home=str(tmp_path / "home" / name),
        )

    return _make


@pytest.fixture
def mock_accounts(make_user):
    accounts = Mock(spec=HostAccounts)
    accounts.require_root = Mock()
    accounts.get_user = Mock(side_effect=make_user)
    accounts.ensure_group_membership = AsyncMock(return_value=False)
    return accounts


@pytest.fixture
def mock_installer():
    installer = Mock(spec=MountHelperInstaller)
    installer.ensure_installed = AsyncMock(return_value=False)
    return installer
