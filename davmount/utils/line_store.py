"""
Line-oriented file edits shared by the secrets files and the mount table.

Every rewrite goes through a temporary sibling file that is renamed over
the original, so an interrupted run never leaves a truncated file behind.
Files live in directories local users may own, so nothing here follows a
symlink: managed paths are opened with O_NOFOLLOW, and mode and ownership
are applied through the open descriptor.
"""

import errno
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Callable, Hashable, List, Optional

import aiofiles
import aiofiles.os

from ..core.exceptions import UnsafePathError

logger = logging.getLogger(__name__)

KeyFn = Callable[[str], Optional[Hashable]]

TEMP_FILE_SUFFIX = ".tmp"


def open_nofollow(path: Path, flags: int, mode: int = 0o600) -> int:
    """``os.open`` that refuses a symlink as the final path component."""
    try:
        return os.open(path, flags | os.O_NOFOLLOW, mode)
    except OSError as e:
        if e.errno == errno.ELOOP:
            raise UnsafePathError(path) from e
        raise


async def read_lines(path: Path) -> List[str]:
    """Return the file's lines without line terminators ([] if it is missing)."""
    try:
        fd = open_nofollow(path, os.O_RDONLY)
    except FileNotFoundError:
        return []
    async with aiofiles.open(fd, "r", encoding="utf-8") as f:
        content = await f.read()
    return content.splitlines()


async def write_lines_atomic(path: Path, lines: List[str]) -> None:
    """Replace ``path`` with ``lines``, keeping its mode and ownership."""
    try:
        original = os.lstat(path)
    except FileNotFoundError:
        original = None
    if original is not None and stat.S_ISLNK(original.st_mode):
        raise UnsafePathError(path)

    # mkstemp: O_EXCL, random name, mode 0600 from the start
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=TEMP_FILE_SUFFIX
    )
    try:
        async with aiofiles.open(fd, "w", encoding="utf-8") as f:
            if original is not None:
                if (original.st_uid, original.st_gid) != _fd_owner(fd):
                    os.fchown(fd, original.st_uid, original.st_gid)
                os.fchmod(fd, stat.S_IMODE(original.st_mode))
            await f.write("".join(f"{line}\n" for line in lines))
        await aiofiles.os.replace(tmp_name, path)
    except BaseException:
        _discard(tmp_name)
        raise


async def upsert_line(path: Path, key_fn: KeyFn, new_line: str) -> bool:
    """
    Make ``new_line`` the only line in ``path`` with its key.

    Lines whose key equals ``key_fn(new_line)`` are dropped and ``new_line``
    is appended. Lines for which ``key_fn`` returns None (comments, blanks,
    entries belonging to something else) are kept verbatim.

    Returns:
        bool: True if the file content changed
    """
    key = key_fn(new_line)
    if key is None:
        raise ValueError(f"Line has no key: {new_line!r}")

    lines = await read_lines(path)
    kept = [line for line in lines if key_fn(line) != key]
    replaced = len(lines) - len(kept)

    # A single identical entry stays where it is
    if replaced == 1 and new_line in lines:
        logger.debug(f"{path}: entry already up to date")
        return False

    updated = kept + [new_line]
    await write_lines_atomic(path, updated)
    logger.debug(f"{path}: wrote entry (replaced {replaced} existing)")
    return True


async def append_unique_line(path: Path, line: str) -> bool:
    """Append ``line`` unless an identical line is already present."""
    lines = await read_lines(path)
    if line in lines:
        return False

    # Keep whatever trailing newline state the file had intact
    prefix = ""
    if lines and await _missing_final_newline(path):
        prefix = "\n"

    fd = open_nofollow(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT)
    async with aiofiles.open(fd, "a", encoding="utf-8") as f:
        await f.write(f"{prefix}{line}\n")
    logger.debug(f"{path}: appended {line!r}")
    return True


async def ensure_file(path: Path, mode: int, uid: Optional[int] = None, gid: Optional[int] = None) -> None:
    """Create ``path`` if missing, then apply mode and (optionally) ownership."""
    try:
        fd = open_nofollow(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        logger.debug(f"Created {path}")
    except FileExistsError:
        fd = open_nofollow(path, os.O_RDONLY)
    try:
        _apply_fd_ownership(fd, mode, uid, gid)
    finally:
        os.close(fd)


async def ensure_directory(path: Path, mode: int, uid: Optional[int] = None, gid: Optional[int] = None) -> None:
    """Create ``path`` (and parents) if missing, then apply mode and ownership."""
    if not await aiofiles.os.path.isdir(path):
        await aiofiles.os.makedirs(path, exist_ok=True)
        logger.debug(f"Created directory {path}")
    apply_ownership(path, mode, uid, gid)


def apply_ownership(path: Path, mode: int, uid: Optional[int] = None, gid: Optional[int] = None) -> None:
    fd = open_nofollow(path, os.O_RDONLY)
    try:
        _apply_fd_ownership(fd, mode, uid, gid)
    finally:
        os.close(fd)


def _apply_fd_ownership(fd: int, mode: int, uid: Optional[int], gid: Optional[int]) -> None:
    if uid is not None or gid is not None:
        current_uid, current_gid = _fd_owner(fd)
        target = (
            current_uid if uid is None else uid,
            current_gid if gid is None else gid,
        )
        if target != (current_uid, current_gid):
            os.fchown(fd, *target)
    os.fchmod(fd, mode)


def _fd_owner(fd: int) -> tuple:
    st = os.fstat(fd)
    return st.st_uid, st.st_gid


def _discard(tmp_name: str) -> None:
    try:
        os.unlink(tmp_name)
    except FileNotFoundError:
        pass


async def _missing_final_newline(path: Path) -> bool:
    fd = open_nofollow(path, os.O_RDONLY)
    async with aiofiles.open(fd, "rb") as f:
        content = await f.read()
    return bool(content) and not content.endswith(b"\n")
