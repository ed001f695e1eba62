"""Version suffix handling for packaged schema files."""

from __future__ import annotations

import posixpath

SKIP_VERSION_PROFILE = "skipVersion"

SCHEMA_EXTENSION = ".xsd"


def short_version(version: str) -> str:
    """Return the `major.minor` part of a project version (e.g. 1.3.7 -> 1.3)."""
    parts = version.strip().split(".")
    if len(parts) < 2 or not all(parts[:2]):
        raise ValueError(f"Cannot derive major.minor from version '{version}'")
    return f"{parts[0]}.{parts[1]}"


def versioned_name(filename: str, version: str, *, skip: bool = False) -> str:
    """Return the packaged name for a schema file.

    Only the trailing extension is replaced, so `xsdtypes.xsd` becomes
    `xsdtypes-1.3.xsd` rather than losing the leading "xsd".
    """
    if skip:
        return filename

    suffix = short_version(version)

    if filename.endswith(SCHEMA_EXTENSION):
        stem = filename[: -len(SCHEMA_EXTENSION)]
        return f"{stem}-{suffix}{SCHEMA_EXTENSION}"

    stem, ext = posixpath.splitext(filename)
    return f"{stem}-{suffix}{ext}"
