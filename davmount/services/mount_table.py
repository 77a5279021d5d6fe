"""
System mount table (/etc/fstab) entries for davfs mounts.

Entries are keyed by mount point: at most one ``davfs`` line per mount
point, whatever its URL or options were on earlier runs.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

from ..models import DAVFS_FS_TYPE, MountMode, MountTableEntry
from ..utils.line_store import upsert_line

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "  "
DIR_MODE = "0750"
FILE_MODE = "0640"

# fstab(5) octal escapes for characters that would split a field
_FSTAB_ESCAPES = {" ": r"\040", "\t": r"\011", "\n": r"\012", "\\": r"\134"}
_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def encode_fstab_field(value: str) -> str:
    return "".join(_FSTAB_ESCAPES.get(ch, ch) for ch in value)


def decode_fstab_field(value: str) -> str:
    return _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), value)


def build_mount_options(mode: MountMode, uid: int, gid: int, idle_timeout_seconds: int = 600) -> str:
    """
    Build the option string for one davfs entry.

    Every mode shares read-write, user-mountable, fixed ownership and
    permissions and ``_netdev`` so boot ordering waits for the network.
    """
    options: List[str] = [
        "rw",
        "users",
        f"uid={uid}",
        f"gid={gid}",
        f"dir_mode={DIR_MODE}",
        f"file_mode={FILE_MODE}",
        "_netdev",
    ]

    if mode == MountMode.AUTOMOUNT:
        options += [
            "x-systemd.automount",
            f"x-systemd.idle-timeout={idle_timeout_seconds}",
            "defaults",
            "nofail",
        ]
    elif mode == MountMode.PERSIST:
        options += ["defaults", "nofail"]
    else:
        options.append("noauto")

    return ",".join(options)


def format_mount_line(entry: MountTableEntry) -> str:
    return FIELD_SEPARATOR.join(
        [
            encode_fstab_field(entry.url),
            encode_fstab_field(entry.mount_path),
            entry.fs_type,
            entry.options,
            str(entry.dump_freq),
            str(entry.pass_no),
        ]
    )


def mount_line_key(line: str) -> Optional[Tuple[str, str]]:
    """``(mount_point, fs_type)`` for a davfs entry, None for anything else."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    fields = stripped.split()
    if len(fields) < 3 or fields[2] != DAVFS_FS_TYPE:
        return None
    return decode_fstab_field(fields[1]), fields[2]


class MountTable:
    def __init__(self, path: Path):
        self.path = Path(path)

    async def upsert(self, entry: MountTableEntry) -> bool:
        changed = await upsert_line(self.path, mount_line_key, format_mount_line(entry))
        if changed:
            logger.debug(f"{self.path}: davfs entry for {entry.mount_path} written")
        return changed
