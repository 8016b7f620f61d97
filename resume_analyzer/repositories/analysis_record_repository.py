import json

from resume_analyzer.pipeline.exceptions import TransportError
from resume_analyzer.pipeline.models import AnalysisRecord
from resume_analyzer.pipeline.port_calls import call_port
from resume_analyzer.pipeline.timeouts import describe_seconds
from resume_analyzer.ports.base import BaseKeyValueStore


class AnalysisRecordRepository:
    """Key-value store operations for analysis records (``<prefix>:<id>``)."""

    def __init__(
        self,
        kv: BaseKeyValueStore,
        *,
        key_prefix: str = "resume",
        get_timeout_seconds: float = 30,
        set_timeout_seconds: float = 60,
    ) -> None:
        self._kv = kv
        self._prefix = key_prefix
        self._get_timeout = get_timeout_seconds
        self._set_timeout = set_timeout_seconds

    def key_for(self, record_id: str) -> str:
        return f"{self._prefix}:{record_id}"

    async def save(self, record: AnalysisRecord) -> None:
        """Write the record under its key.

        Raises:
            TransportError: if the store reports an error or raises.
            StageTimeoutError: if the store does not answer in time.
        """
        key = self.key_for(record.id)
        result = await call_port(
            self._kv.set(key, json.dumps(record.to_dict())),
            operation="Key-value set",
            timeout_seconds=self._set_timeout,
            timeout_message=self._timeout_message("set", self._set_timeout),
        )
        if result.data is False:
            raise TransportError(f"Key-value store rejected write for {key}")

    async def get(self, record_id: str) -> AnalysisRecord | None:
        """Return the record, or None if no such key exists."""
        result = await call_port(
            self._kv.get(self.key_for(record_id)),
            operation="Key-value get",
            timeout_seconds=self._get_timeout,
            timeout_message=self._timeout_message("get", self._get_timeout),
        )
        if result.data is None:
            return None
        return self._decode(result.data)

    async def list_all(self) -> list[AnalysisRecord]:
        result = await call_port(
            self._kv.list(f"{self._prefix}:*", return_values=True),
            operation="Key-value list",
            timeout_seconds=self._get_timeout,
            timeout_message=self._timeout_message("list", self._get_timeout),
        )
        return [self._decode(raw) for raw in result.data or []]

    async def delete(self, record_id: str) -> bool:
        result = await call_port(
            self._kv.delete(self.key_for(record_id)),
            operation="Key-value delete",
            timeout_seconds=self._set_timeout,
            timeout_message=self._timeout_message("delete", self._set_timeout),
        )
        return bool(result.data)

    async def wipe(self) -> int:
        """Delete every record under this prefix; returns how many were removed."""
        keys = await call_port(
            self._kv.list(f"{self._prefix}:*"),
            operation="Key-value list",
            timeout_seconds=self._get_timeout,
            timeout_message=self._timeout_message("list", self._get_timeout),
        )
        removed = 0
        for key in keys.data or []:
            deleted = await call_port(
                self._kv.delete(key),
                operation="Key-value delete",
                timeout_seconds=self._set_timeout,
                timeout_message=self._timeout_message("delete", self._set_timeout),
            )
            removed += int(bool(deleted.data))
        return removed

    @staticmethod
    def _timeout_message(operation: str, seconds: float) -> str:
        return f"Key-value {operation} operation timed out after {describe_seconds(seconds)}"

    @staticmethod
    def _decode(raw: str) -> AnalysisRecord:
        try:
            return AnalysisRecord.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError) as exc:
            raise TransportError(f"Stored record is malformed: {exc}") from exc
