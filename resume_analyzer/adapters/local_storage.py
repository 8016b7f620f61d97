import asyncio
import uuid
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from resume_analyzer.ports.base import BaseBlobStorage
from resume_analyzer.ports.models import FileItem, UploadFile
from resume_analyzer.ports.result import ServiceResult


class LocalBlobStorage(BaseBlobStorage):
    """Blob storage on the local filesystem.

    Paths are POSIX-style and rooted at ``root`` (``/uploads/<id>/resume.pdf``).
    Uploads land in a fresh directory per file so names never collide.
    """

    UPLOAD_DIR = "uploads"

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    async def upload(self, files: Sequence[UploadFile]) -> ServiceResult[FileItem]:
        if not files:
            return ServiceResult.fail("No files provided for upload")
        try:
            items = [await asyncio.to_thread(self._store_upload, file) for file in files]
        except (OSError, ValueError) as exc:
            return ServiceResult.fail(f"Upload failed: {exc}")
        return ServiceResult.ok(items[0])

    async def read(self, path: str) -> ServiceResult[bytes]:
        try:
            return ServiceResult.ok(await asyncio.to_thread(self._resolve(path).read_bytes))
        except (OSError, ValueError) as exc:
            return ServiceResult.fail(f"Read failed: {exc}")

    async def write(self, path: str, data: bytes | str) -> ServiceResult[FileItem]:
        content = data.encode("utf-8") if isinstance(data, str) else data
        try:
            target = self._resolve(path)
            await asyncio.to_thread(self._write_bytes, target, content)
        except (OSError, ValueError) as exc:
            return ServiceResult.fail(f"Write failed: {exc}")
        return ServiceResult.ok(self._describe(target, content_type=None))

    async def delete(self, path: str) -> ServiceResult[None]:
        try:
            await asyncio.to_thread(self._resolve(path).unlink)
        except (OSError, ValueError) as exc:
            return ServiceResult.fail(f"Delete failed: {exc}")
        return ServiceResult.ok(None)

    async def list(self, path: str) -> ServiceResult[list[FileItem]]:
        try:
            directory = self._resolve(path)
            if not directory.exists():
                return ServiceResult.ok([])
            entries = await asyncio.to_thread(lambda: sorted(directory.iterdir()))
        except (OSError, ValueError) as exc:
            return ServiceResult.fail(f"List failed: {exc}")
        return ServiceResult.ok([self._describe(entry, content_type=None) for entry in entries])

    def _store_upload(self, file: UploadFile) -> FileItem:
        file_id = str(uuid.uuid4())
        name = PurePosixPath(file.name).name or "upload.bin"
        target = self._resolve(f"/{self.UPLOAD_DIR}/{file_id}/{name}")
        self._write_bytes(target, file.content)
        return FileItem(
            id=file_id,
            name=name,
            path=self._storage_path(target),
            url=target.as_uri(),
            size=file.size,
            type=file.media_type,
        )

    @staticmethod
    def _write_bytes(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path.lstrip("/"))
        target = (self._root / relative).resolve()
        if not target.is_relative_to(self._root):
            raise ValueError(f"Path escapes storage root: {path}")
        return target

    def _storage_path(self, target: Path) -> str:
        return "/" + target.relative_to(self._root).as_posix()

    def _describe(self, target: Path, content_type: str | None) -> FileItem:
        size = target.stat().st_size if target.is_file() else None
        return FileItem(
            id=self._storage_path(target),
            name=target.name,
            path=self._storage_path(target),
            url=target.as_uri(),
            size=size,
            type=content_type,
        )
