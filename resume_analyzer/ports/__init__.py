from resume_analyzer.ports.base import (
    BaseBlobStorage,
    BaseIdentityService,
    BaseInferenceService,
    BaseKeyValueStore,
)
from resume_analyzer.ports.result import ServiceResult

__all__ = [
    "BaseBlobStorage",
    "BaseIdentityService",
    "BaseInferenceService",
    "BaseKeyValueStore",
    "ServiceResult",
]
