from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from .core.exceptions import ValidationError

DAVFS_FS_TYPE = "davfs"


class MountMode(str, Enum):
    """
    Hvordan en mount bliver aktiveret.

    MANUAL: only mounted when someone runs ``mount <path>`` (fstab ``noauto``)
    AUTOMOUNT: systemd mounts on first access and unmounts after an idle period
    PERSIST: mounted at boot by the init system
    """

    MANUAL = "manual"
    AUTOMOUNT = "automount"
    PERSIST = "persist"


class MountMapping(BaseModel):
    """One local user, the remote account it mounts, and where it appears."""

    model_config = ConfigDict(frozen=True)

    local_user: str = Field(..., min_length=1, description="Lokal UNIX bruger")
    remote_user: str = Field(..., min_length=1, description="Remote WebDAV account")
    mount_path: str = Field(..., min_length=1, description="Absolut mount sti")

    @field_validator("mount_path")
    @classmethod
    def mount_path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"mount path must be absolute: {value}")
        return value

    @classmethod
    def parse(cls, raw: str) -> "MountMapping":
        """Parse a ``local:remote:path`` triple."""
        parts = raw.split(":")
        if len(parts) != 3 or not all(parts):
            raise ValidationError(f"bad --map {raw}")
        try:
            return cls(local_user=parts[0], remote_user=parts[1], mount_path=parts[2])
        except PydanticValidationError as e:
            raise ValidationError(f"bad --map {raw}: {_first_error(e)}") from e


class CredentialSource(BaseModel):
    """Names the environment variable holding a remote user's password."""

    model_config = ConfigDict(frozen=True)

    remote_user: str = Field(..., min_length=1)
    env_var: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, raw: str) -> "CredentialSource":
        """Parse a ``remote:ENVVAR`` pair."""
        remote_user, sep, env_var = raw.partition(":")
        if not sep or not remote_user or not env_var:
            raise ValidationError(f"bad --secret {raw}")
        return cls(remote_user=remote_user, env_var=env_var)


class SecretRecord(BaseModel):
    """One credential line as read by the davfs2 mount helper."""

    model_config = ConfigDict(frozen=True)

    url: str
    remote_user: str
    password: str


class MountTableEntry(BaseModel):
    """One davfs line in the system mount table."""

    model_config = ConfigDict(frozen=True)

    url: str
    mount_path: str
    fs_type: str = DAVFS_FS_TYPE
    options: str
    dump_freq: int = 0
    pass_no: int = 0


class ProvisionRequest(BaseModel):
    """Everything a provisioning run needs, validated before any mutation."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1)
    mappings: List[MountMapping] = Field(..., min_length=1)
    credential_sources: List[CredentialSource] = Field(default_factory=list)
    mode: MountMode = MountMode.MANUAL
    no_locks: bool = False
    insecure_tls: bool = False
    system_secrets: bool = False

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        normalized = value.strip().rstrip("/")
        if not normalized:
            raise ValueError("--base-url required")
        return normalized

    @model_validator(mode="after")
    def mount_paths_unique(self) -> "ProvisionRequest":
        seen = set()
        for mapping in self.mappings:
            if mapping.mount_path in seen:
                raise ValueError(f"mount path mapped twice: {mapping.mount_path}")
            seen.add(mapping.mount_path)
        return self

    @classmethod
    def from_cli(
        cls,
        base_url: Optional[str],
        maps: Sequence[str],
        secrets: Sequence[str] = (),
        auto: bool = False,
        persist: bool = False,
        no_locks: bool = False,
        insecure: bool = False,
        system_secrets: bool = False,
    ) -> "ProvisionRequest":
        """Build a request from raw flag values, raising ValidationError on bad input."""
        if not base_url:
            raise ValidationError("--base-url required")
        if not maps:
            raise ValidationError("at least one --map")
        if auto and persist:
            raise ValidationError("--auto and --persist are mutually exclusive")

        mappings = [MountMapping.parse(raw) for raw in maps]
        sources = [CredentialSource.parse(raw) for raw in secrets]

        if auto:
            mode = MountMode.AUTOMOUNT
        elif persist:
            mode = MountMode.PERSIST
        else:
            mode = MountMode.MANUAL

        try:
            return cls(
                base_url=base_url,
                mappings=mappings,
                credential_sources=sources,
                mode=mode,
                no_locks=no_locks,
                insecure_tls=insecure,
                system_secrets=system_secrets,
            )
        except PydanticValidationError as e:
            raise ValidationError(_first_error(e)) from e

    @property
    def env_var_by_remote_user(self) -> Dict[str, str]:
        """Later sources for the same remote user win."""
        return {source.remote_user: source.env_var for source in self.credential_sources}

    def user_url(self, remote_user: str) -> str:
        return f"{self.base_url}/{remote_user}/"


def _first_error(error: PydanticValidationError) -> str:
    message = error.errors()[0]["msg"]
    # pydantic prefixes errors raised from validators with "Value error, "
    return message.removeprefix("Value error, ")
