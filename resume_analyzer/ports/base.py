"""Capability ports the pipeline is written against.

Every method returns a ServiceResult. Adapters catch their own transport
failures and report them through the ``error`` branch instead of raising.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from resume_analyzer.ports.models import AIMessage, AIResponse, AuthUser, FileItem, UploadFile
from resume_analyzer.ports.result import ServiceResult


class BaseIdentityService(ABC):
    """Contract for account/auth backends."""

    @abstractmethod
    async def get_user(self) -> ServiceResult[AuthUser]:
        """Return the signed-in user, or an error when nobody is signed in."""

    @abstractmethod
    async def is_signed_in(self) -> ServiceResult[bool]:
        """Report whether a user session is active."""

    @abstractmethod
    async def sign_in(self) -> ServiceResult[None]:
        """Start a user session."""

    @abstractmethod
    async def sign_out(self) -> ServiceResult[None]:
        """End the current user session."""


class BaseBlobStorage(ABC):
    """Contract for file storage backends."""

    @abstractmethod
    async def upload(self, files: Sequence[UploadFile]) -> ServiceResult[FileItem]:
        """Store the given files and describe the first stored one.

        Returns:
            ServiceResult whose data is the FileItem for ``files[0]``.
        """

    @abstractmethod
    async def read(self, path: str) -> ServiceResult[bytes]:
        """Return the stored bytes at ``path``."""

    @abstractmethod
    async def write(self, path: str, data: bytes | str) -> ServiceResult[FileItem]:
        """Create or overwrite the file at ``path``."""

    @abstractmethod
    async def delete(self, path: str) -> ServiceResult[None]:
        """Remove the file at ``path``."""

    @abstractmethod
    async def list(self, path: str) -> ServiceResult[list[FileItem]]:
        """List files directly under the directory ``path``."""


class BaseKeyValueStore(ABC):
    """Contract for string key-value backends."""

    @abstractmethod
    async def get(self, key: str) -> ServiceResult[str]:
        """Return the value for ``key``; ``data`` is None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> ServiceResult[bool]:
        """Store ``value`` under ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> ServiceResult[bool]:
        """Remove ``key``; ``data`` tells whether it existed."""

    @abstractmethod
    async def list(self, pattern: str, return_values: bool = False) -> ServiceResult[list[str]]:
        """List keys matching a glob ``pattern`` (``*`` wildcard).

        Args:
            pattern: Glob such as ``resume:*``.
            return_values: Return the stored values instead of the keys.
        """

    @abstractmethod
    async def flush(self) -> ServiceResult[bool]:
        """Remove every key."""


class BaseInferenceService(ABC):
    """Contract for AI inference backends."""

    @abstractmethod
    async def chat(
        self,
        prompt: str | list[AIMessage],
        options: dict[str, Any] | None = None,
    ) -> ServiceResult[AIResponse]:
        """Send a free-form chat prompt."""

    @abstractmethod
    async def feedback(self, file_ref: str | UploadFile, instructions: str) -> ServiceResult[AIResponse]:
        """Ask for feedback on a document.

        Args:
            file_ref: Blob storage path of an uploaded document, or the file itself.
            instructions: Instruction text sent alongside the document.
        """

    @abstractmethod
    async def img2txt(self, image: str | UploadFile) -> ServiceResult[str]:
        """Transcribe the text visible in an image (storage path or file)."""
