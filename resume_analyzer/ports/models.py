from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthUser:
    """Signed-in account as reported by the identity backend."""

    id: str
    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class UploadFile:
    """In-memory file handed to blob storage."""

    name: str
    content: bytes
    media_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class FileItem:
    """Stored file as reported by blob storage."""

    id: str
    name: str
    path: str
    url: str
    size: int | None = None
    type: str | None = None


@dataclass(frozen=True)
class ContentPart:
    """One element of a multi-part message body."""

    type: str
    text: str = ""
    extra: dict[str, object] = field(default_factory=dict)


MessageContent = str | list[ContentPart]


@dataclass(frozen=True)
class AIMessage:
    content: MessageContent
    role: str = "assistant"


@dataclass(frozen=True)
class AIResponse:
    """Inference reply. ``message.content`` is plain text or a list of parts."""

    message: AIMessage
