# davmount/core/exceptions.py

class ProvisioningError(Exception):
    """Base class for every fatal provisioning error."""


class ValidationError(ProvisioningError):
    """Raised when command-line input has the wrong shape."""


class PrivilegeError(ProvisioningError, PermissionError):
    """Raised when provisioning is attempted without root privileges."""

    def __init__(self, euid: int):
        self.euid = euid
        super().__init__(f"Run as root (effective uid is {euid}).")


class HostEnvironmentError(ProvisioningError, EnvironmentError):
    """Raised when the host lacks something provisioning depends on."""


class CommandFailedError(HostEnvironmentError):
    """Raised when an external command exits non-zero."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(
            f"Command '{' '.join(command)}' failed with exit code {returncode}{detail}"
        )


class ConfigError(ProvisioningError):
    """Raised when a credential is missing or empty."""


class UnsafePathError(HostEnvironmentError):
    """Raised when a file davmount manages turns out to be a symlink."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Refusing to follow symlink at {path}")
