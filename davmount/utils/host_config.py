"""
Host-specific configuration management utility.

Selects the settings file for the machine davmount runs on, so one
checkout can carry provisioning defaults for several hosts.
"""

import socket
from pathlib import Path
import logging

BASE_SETTINGS_FILE = "davmount.env"
HOST_SETTINGS_SUFFIX = "-davmount.env"


def get_hostname_settings_file() -> str:
    """
    Get the appropriate settings file for this host.

    Logic:
    1. Get current hostname
    2. Use {hostname}-davmount.env if it exists
    3. Otherwise use davmount.env (which may not exist either;
       pydantic-settings simply skips a missing env file)

    Returns:
        str: Path to the settings file to load
    """
    host_settings = Path(f"{get_hostname()}{HOST_SETTINGS_SUFFIX}")

    if host_settings.exists():
        logging.debug(f"Using host-specific configuration: {host_settings}")
        return str(host_settings)

    return BASE_SETTINGS_FILE


def list_all_settings_files() -> list[str]:
    """
    List all available settings files (base + host-specific).

    Returns:
        list[str]: List of settings file paths
    """
    settings_files = []

    if Path(BASE_SETTINGS_FILE).exists():
        settings_files.append(BASE_SETTINGS_FILE)

    for file_path in Path(".").glob(f"*{HOST_SETTINGS_SUFFIX}"):
        settings_files.append(str(file_path))

    return settings_files


def get_hostname() -> str:
    """Get the current hostname (without domain)."""
    return socket.gethostname().split('.')[0]
