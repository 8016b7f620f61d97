import uuid

from resume_analyzer.ports.models import UploadFile


class ObjectUrlRegistry:
    """Issues revocable in-process URLs for rendered images."""

    SCHEME = "blob:resume-analyzer/"

    def __init__(self) -> None:
        self._objects: dict[str, UploadFile] = {}

    def create(self, file: UploadFile) -> str:
        url = f"{self.SCHEME}{uuid.uuid4()}"
        self._objects[url] = file
        return url

    def resolve(self, url: str) -> UploadFile | None:
        return self._objects.get(url)

    def revoke(self, url: str) -> bool:
        """Release a URL. Returns False if it was unknown or already revoked."""
        return self._objects.pop(url, None) is not None

    def __len__(self) -> int:
        return len(self._objects)
