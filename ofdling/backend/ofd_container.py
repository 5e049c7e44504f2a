"""Read-only access to the entries of an OFD (ZIP) container."""

from __future__ import annotations

import logging
import zipfile
import zlib
from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import List, Optional, Union

from ofdling.exceptions import ContainerError

_log = logging.getLogger(__name__)


def _normalize_posix(path: PurePosixPath) -> PurePosixPath:
    parts: List[str] = []
    for part in path.parts:
        if part in {"", ".", "/"}:
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return PurePosixPath(*parts)


def resolve_path(
    base_dir: PurePosixPath,
    target: str,
    base_loc: Optional[str] = None,
) -> str:
    """Resolve an in-archive reference to an entry name.

    Absolute references (``/Doc_0/Pages/Page_0/Content.xml``) start at the
    archive root, relative ones at ``base_dir``, or at ``base_loc`` when a
    resource file declares one.
    """
    target = target.strip()
    if not target:
        raise ContainerError("Empty entry reference")

    target_path = PurePosixPath(target)
    if target_path.is_absolute():
        return str(_normalize_posix(target_path))

    base_path = base_dir
    if base_loc:
        base_candidate = PurePosixPath(base_loc.strip())
        if base_candidate.is_absolute():
            base_path = _normalize_posix(base_candidate)
        else:
            base_path = _normalize_posix(base_dir / base_candidate)

    return str(_normalize_posix(base_path / target_path))


class OfdContainer:
    """Owns one open ZIP archive and reads its entries by name.

    Entries are read one at a time; the container must not be shared between
    threads.
    """

    def __init__(self, archive: zipfile.ZipFile, max_entry_size: Optional[int] = None):
        self._archive: Optional[zipfile.ZipFile] = archive
        self.max_entry_size = max_entry_size

    @classmethod
    def open(
        cls,
        path_or_stream: Union[BytesIO, Path, str],
        max_entry_size: Optional[int] = None,
    ) -> "OfdContainer":
        if isinstance(path_or_stream, BytesIO):
            path_or_stream.seek(0)
        try:
            archive = zipfile.ZipFile(path_or_stream, "r")
        except (zipfile.BadZipFile, OSError) as exc:
            raise ContainerError(f"Cannot open OFD archive: {exc}") from exc
        _log.debug("Opened OFD archive with %d entries", len(archive.namelist()))
        return cls(archive, max_entry_size=max_entry_size)

    @property
    def closed(self) -> bool:
        return self._archive is None

    def _require_archive(self) -> zipfile.ZipFile:
        if self._archive is None:
            raise ContainerError("OFD archive is closed")
        return self._archive

    def names(self) -> List[str]:
        return self._require_archive().namelist()

    def has_entry(self, name: str) -> bool:
        try:
            self._require_archive().getinfo(name)
        except KeyError:
            return False
        return True

    def read_bytes(self, name: str) -> bytes:
        archive = self._require_archive()
        try:
            info = archive.getinfo(name)
        except KeyError as exc:
            raise ContainerError(f"Entry not found in OFD archive: {name}") from exc
        if self.max_entry_size is not None and info.file_size > self.max_entry_size:
            raise ContainerError(
                f"Entry {name} is {info.file_size} bytes, "
                f"larger than the {self.max_entry_size} byte limit"
            )
        try:
            with archive.open(info) as entry:
                data = entry.read()
        except (
            zipfile.BadZipFile,
            OSError,
            RuntimeError,
            EOFError,
            zlib.error,
        ) as exc:
            raise ContainerError(f"Cannot read entry {name}: {exc}") from exc
        _log.debug("Read %s (%d bytes)", name, len(data))
        return data

    def read_text(self, name: str, encoding: str = "utf-8") -> str:
        data = self.read_bytes(name)
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as exc:
            raise ContainerError(f"Entry {name} is not valid {encoding}") from exc

    def close(self) -> None:
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    def __enter__(self) -> "OfdContainer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
