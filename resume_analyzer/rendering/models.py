import hashlib
from dataclasses import dataclass
from pathlib import PurePosixPath

from resume_analyzer.ports.models import UploadFile

PDF_MEDIA_TYPE = "application/pdf"
PNG_MEDIA_TYPE = "image/png"


@dataclass(frozen=True)
class SourceDocument:
    """A document submitted for analysis."""

    content: bytes
    media_type: str
    name: str
    last_modified: float | None = None

    @property
    def fingerprint(self) -> str:
        """Stable cache key: name plus modification time, or a content hash."""
        if self.last_modified is not None:
            return f"{self.name}:{self.last_modified}"
        digest = hashlib.sha256(self.content).hexdigest()
        return f"{self.name}:sha256:{digest}"

    @property
    def stem(self) -> str:
        name = PurePosixPath(self.name).name
        if name.lower().endswith(".pdf"):
            return name[:-4]
        return name

    def as_upload(self) -> UploadFile:
        return UploadFile(name=self.name, content=self.content, media_type=self.media_type)


@dataclass(frozen=True)
class RenderedImage:
    """Raster rendition of a document's first page.

    ``url`` is a display URL from ObjectUrlRegistry; the caller must revoke
    it once the image is no longer shown. A later cache hit for a revoked
    URL returns a new RenderedImage with a fresh URL for the same file.
    ``file`` is set only on success.
    """

    url: str
    file: UploadFile | None = None
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "RenderedImage":
        return cls(url="", file=None, error=error)

    @property
    def succeeded(self) -> bool:
        return self.file is not None
