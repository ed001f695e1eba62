"""Reproducible zip archives.

Archives written here depend only on the relative paths and contents of the
files being packed: entries are sorted, timestamps are pinned to the zip
epoch and permission bits are fixed, so two builds of the same tree produce
byte-identical output regardless of the machine or umask.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile, ZipInfo

logger = logging.getLogger(__name__)

DIRECTORY_MODE = 0o755
FILE_MODE = 0o644

# earliest timestamp the zip format can represent
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

_UNIX_SYSTEM = 3
_MSDOS_DIRECTORY = 0x10


def _entry(arcname: str, mode: int, *, is_dir: bool) -> ZipInfo:
    info = ZipInfo(arcname, date_time=ZIP_EPOCH)
    info.create_system = _UNIX_SYSTEM
    if is_dir:
        info.external_attr = ((stat.S_IFDIR | mode) << 16) | _MSDOS_DIRECTORY
        info.compress_type = ZIP_STORED
    else:
        info.external_attr = (stat.S_IFREG | mode) << 16
        info.compress_type = ZIP_DEFLATED
    return info


def collect(source: Path, *, exclude: set[Path] | None = None) -> list[tuple[Path, str]]:
    """Return (path, arcname) pairs for everything under source, sorted by arcname."""
    exclude = {p.resolve() for p in exclude or set()}
    entries: list[tuple[Path, str]] = []
    for path in source.rglob("*"):
        if path.resolve() in exclude:
            continue
        arcname = path.relative_to(source).as_posix()
        if path.is_dir():
            arcname += "/"
        entries.append((path, arcname))
    return sorted(entries, key=lambda entry: entry[1])


def create_archive(
    source: str | Path,
    dest: str | Path,
    *,
    dir_mode: int = DIRECTORY_MODE,
    file_mode: int = FILE_MODE,
) -> Path:
    """Pack the tree under source into the zip file at dest.

    The archive is assembled next to dest and moved into place once complete;
    a failure leaves no archive behind.
    """
    source = Path(source)
    dest = Path(dest)
    if not source.is_dir():
        raise NotADirectoryError(f"Archive source is not a directory: {source}")

    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")

    entries = collect(source, exclude={dest, partial})
    logger.debug("Packing %d entries from %s", len(entries), source)

    try:
        with ZipFile(partial, "w") as zf:
            for path, arcname in entries:
                if arcname.endswith("/"):
                    zf.mkdir(_entry(arcname, dir_mode, is_dir=True))
                else:
                    zf.writestr(_entry(arcname, file_mode, is_dir=False), path.read_bytes())
        os.replace(partial, dest)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise

    logger.debug("Created archive %s", dest)
    return dest
