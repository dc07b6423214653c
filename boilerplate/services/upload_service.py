"""UploadService: stream multipart uploads into the upload directory.

Files keep the client's base filename (any directory part is dropped) and
are streamed to a ``.part`` file of their own in chunks, then moved into
place. A file over the size limit is aborted mid-stream and its partial
data removed.
"""
from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Sequence
from uuid import uuid4

import aiofiles
import aiofiles.os
from starlette.datastructures import UploadFile

from boilerplate.core.exceptions import PayloadTooLargeError, UploadError

if TYPE_CHECKING:
    from boilerplate.config import AppConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredFile:
    field: str
    filename: str
    size: int
    content_type: Optional[str]
    path: str

    def to_dict(self) -> dict:
        return asdict(self)


def safe_filename(filename: Optional[str]) -> str:
    """Base name of a client-supplied filename; UploadError if nothing usable is left."""
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    if name in ("", ".", "..") or "\x00" in name:
        raise UploadError(
            "Invalid file name", code="INVALID_FILENAME", details={"filename": filename}
        )
    return name


def present(files: Optional[Sequence[UploadFile]]) -> List[UploadFile]:
    """Drop empty file parts (browsers send one when no file was chosen)."""
    return [f for f in (files or []) if f is not None and f.filename]


class UploadService:
    """Save uploaded files under ``upload_dir`` with a per-file byte limit.

    Usage::

        svc = UploadService.from_config(app_config)
        stored = await svc.save(upload, field="file")
        stored = await svc.save_fields({"avatar": [a], "idCards": [c1, c2]},
                                       max_counts={"avatar": 1, "idCards": 2})
    """

    def __init__(self, upload_dir: str, *, max_bytes: int) -> None:
        self._upload_dir = upload_dir
        self._max_bytes = max_bytes

    @classmethod
    def from_config(cls, config: "AppConfig") -> "UploadService":
        return cls(config.upload_dir, max_bytes=config.upload_max_bytes)

    @property
    def upload_dir(self) -> str:
        return self._upload_dir

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    async def save(self, upload: UploadFile, *, field: str) -> StoredFile:
        name = safe_filename(upload.filename)
        await aiofiles.os.makedirs(self._upload_dir, exist_ok=True)
        target = os.path.join(self._upload_dir, name)
        partial = f"{target}.{uuid4().hex}.part"

        total = 0
        try:
            async with aiofiles.open(partial, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > self._max_bytes:
                        raise PayloadTooLargeError(
                            f"File too large, maximum size is {self._max_bytes} bytes",
                            code="LIMIT_FILE_SIZE",
                            details={"field": field, "filename": name, "max_bytes": self._max_bytes},
                        )
                    await out.write(chunk)
        except BaseException:
            await self._discard(partial)
            raise
        finally:
            await upload.close()

        await aiofiles.os.replace(partial, target)
        logger.info("Stored upload %s (%d bytes) from field %s", target, total, field)
        return StoredFile(
            field=field,
            filename=name,
            size=total,
            content_type=upload.content_type,
            path=target,
        )

    async def save_fields(
        self,
        files_by_field: Mapping[str, Optional[Sequence[UploadFile]]],
        *,
        max_counts: Mapping[str, int],
    ) -> List[StoredFile]:
        """Validate counts for every field first, then store all files in order."""
        selected: Dict[str, List[UploadFile]] = {}
        for field, files in files_by_field.items():
            chosen = present(files)
            limit = max_counts.get(field)
            if limit is not None and len(chosen) > limit:
                raise UploadError(
                    f"Too many files for field {field!r} (max {limit})",
                    code="LIMIT_UNEXPECTED_FILE",
                    details={"field": field, "max_count": limit, "received": len(chosen)},
                )
            selected[field] = chosen

        if not any(selected.values()):
            raise UploadError("Please choose a file to upload", code="NO_FILE")

        stored: List[StoredFile] = []
        for field, files in selected.items():
            for upload in files:
                stored.append(await self.save(upload, field=field))
        return stored

    async def _discard(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove partial upload %s: %s", path, exc)
