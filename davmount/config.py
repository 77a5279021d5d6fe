from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from .utils.host_config import get_hostname_settings_file


class Settings(BaseSettings):
    # System files
    fstab_path: str = "/etc/fstab"
    system_config_dir: str = "/etc/davfs2"
    system_secrets_path: str = "/etc/davfs2/secrets"

    # Mount helper
    davfs_group: str = "davfs2"
    mount_helper_binary: str = "mount.davfs"
    package_name: str = "davfs2"

    # Per-user configuration, relative to the user's home directory
    user_config_dirname: str = ".davfs2"
    user_secrets_filename: str = "secrets"
    user_conf_filename: str = "davfs2.conf"

    # Mount behaviour
    automount_idle_timeout_seconds: int = 600  # x-systemd.idle-timeout

    # External commands
    command_timeout_seconds: float = 600.0  # package installs can be slow

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = ""  # empty = console only
    log_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_prefix="DAVMOUNT_",
        env_file=get_hostname_settings_file(),
        extra="ignore",
    )

    @property
    def log_directory(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_file_path).parent

    @property
    def config_file_info(self) -> dict:
        """Return information about which configuration file is being used."""
        from .utils.host_config import get_hostname, list_all_settings_files

        return {
            "hostname": get_hostname(),
            "active_config_file": get_hostname_settings_file(),
            "all_available_configs": list_all_settings_files(),
        }
