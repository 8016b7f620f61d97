from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from resume_analyzer.adapters.example_inference import ExampleInferenceAdapter
from resume_analyzer.adapters.local_identity import LocalIdentityService
from resume_analyzer.adapters.local_storage import LocalBlobStorage
from resume_analyzer.adapters.memory_kv import InMemoryKeyValueStore
from resume_analyzer.adapters.openai_inference import OpenAIInferenceAdapter
from resume_analyzer.adapters.postgres_kv import PostgresKeyValueStore
from resume_analyzer.config.settings import Settings
from resume_analyzer.ports.base import (
    BaseBlobStorage,
    BaseIdentityService,
    BaseInferenceService,
    BaseKeyValueStore,
)
from resume_analyzer.ports.models import AuthUser


@dataclass(frozen=True)
class Services:
    """One adapter per capability port."""

    identity: BaseIdentityService
    storage: BaseBlobStorage
    kv: BaseKeyValueStore
    ai: BaseInferenceService


class ServicesFactory:
    """Creates the configured adapter for each capability port."""

    STORAGE_PROVIDERS: ClassVar[tuple[str, ...]] = ("local",)
    KV_PROVIDERS: ClassVar[tuple[str, ...]] = ("memory", "postgres")
    AI_PROVIDERS: ClassVar[tuple[str, ...]] = ("example", "openai", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings) -> Services:
        storage = cls.create_storage(settings)
        return Services(
            identity=LocalIdentityService(
                AuthUser(id=settings.identity_user_id, name=settings.identity_user_name)
            ),
            storage=storage,
            kv=cls.create_kv(settings),
            ai=cls.create_ai(settings, storage),
        )

    @classmethod
    def create_storage(cls, settings: Settings) -> BaseBlobStorage:
        provider = settings.storage_provider.lower()
        if provider == "local":
            return LocalBlobStorage(Path(settings.storage_root))
        raise ValueError(
            f"Unknown storage provider '{provider}'. Choose from: {list(cls.STORAGE_PROVIDERS)}"
        )

    @classmethod
    def create_kv(cls, settings: Settings) -> BaseKeyValueStore:
        provider = settings.kv_provider.lower()
        if provider == "memory":
            return InMemoryKeyValueStore()
        if provider == "postgres":
            return PostgresKeyValueStore(settings.db_kv_table)
        raise ValueError(
            f"Unknown key-value provider '{provider}'. Choose from: {list(cls.KV_PROVIDERS)}"
        )

    @classmethod
    def create_ai(cls, settings: Settings, storage: BaseBlobStorage) -> BaseInferenceService:
        provider = settings.ai_provider.lower()
        if provider == "example":
            return ExampleInferenceAdapter()
        if provider == "openai":
            return OpenAIInferenceAdapter(
                api_key=settings.ai_openai_api_key,
                model=settings.ai_openai_model_name,
                timeout_seconds=settings.ai_openai_timeout_seconds,
                storage=storage,
            )
        if provider == "openai_compatible":
            base_url = settings.ai_openai_compatible_base_url.strip()
            if not base_url:
                raise ValueError(
                    "ai_openai_compatible_base_url is required for ai_provider=openai_compatible"
                )
            return OpenAIInferenceAdapter(
                api_key=settings.ai_openai_compatible_api_key,
                model=settings.ai_openai_compatible_model_name,
                timeout_seconds=settings.ai_openai_compatible_timeout_seconds,
                storage=storage,
                base_url=base_url,
            )
        raise ValueError(
            f"Unknown AI provider '{provider}'. Choose from: {list(cls.AI_PROVIDERS)}"
        )
