from resume_analyzer.ports.base import BaseIdentityService
from resume_analyzer.ports.models import AuthUser
from resume_analyzer.ports.result import ServiceResult


class LocalIdentityService(BaseIdentityService):
    """Single-user identity backed by configuration."""

    def __init__(self, user: AuthUser) -> None:
        self._user = user
        self._signed_in = False

    async def get_user(self) -> ServiceResult[AuthUser]:
        if not self._signed_in:
            return ServiceResult.fail("Not signed in")
        return ServiceResult.ok(self._user)

    async def is_signed_in(self) -> ServiceResult[bool]:
        return ServiceResult.ok(self._signed_in)

    async def sign_in(self) -> ServiceResult[None]:
        self._signed_in = True
        return ServiceResult.ok(None)

    async def sign_out(self) -> ServiceResult[None]:
        self._signed_in = False
        return ServiceResult.ok(None)
