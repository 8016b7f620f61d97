import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from resume_analyzer.adapters.factory import ServicesFactory
from resume_analyzer.config.settings import Settings
from resume_analyzer import main as main_module
from resume_analyzer.adapters.postgres_kv import PostgresKeyValueStore
from resume_analyzer.main import _main_async, analyze, load_document, main
from resume_analyzer.pipeline.models import AnalysisRequest, Done, Failed, JobContext, Stage
from resume_analyzer.rendering import shared


@pytest.fixture(autouse=True)
def _reset_renderer() -> Iterator[None]:
    yield
    shared.close_renderer()


@pytest.fixture
def resume_on_disk(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "Jane Doe.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


class TestLoadDocument:
    def test_reads_pdf(self, resume_on_disk: Path, sample_pdf_bytes: bytes) -> None:
        doc = load_document(resume_on_disk)
        assert doc.content == sample_pdf_bytes
        assert doc.media_type == "application/pdf"
        assert doc.name == "Jane Doe.pdf"
        assert doc.last_modified == resume_on_disk.stat().st_mtime

    def test_unknown_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "resume"
        path.write_bytes(b"data")
        assert load_document(path).media_type == "application/octet-stream"


class TestAnalyze:
    async def test_full_run_with_local_services(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        settings = Settings(storage_root=str(tmp_path / "storage"), render_scale=1.0)
        services = ServicesFactory.create(settings)
        request = AnalysisRequest(
            document=load_document(resume_on_disk),
            job=JobContext(job_title="Data Engineer"),
        )

        outcome = await analyze(settings, services, request)

        assert isinstance(outcome, Done)
        stored = (await services.kv.get(f"resume:{outcome.record_id}")).data
        assert stored is not None
        record = json.loads(stored)
        assert record["jobTitle"] == "Data Engineer"
        assert record["feedback"]["overallScore"] == 70
        assert record["imagePath"].endswith("/Jane Doe.png")
        assert (tmp_path / "storage" / record["imagePath"].lstrip("/")).read_bytes().startswith(b"\x89PNG")

        out = capsys.readouterr().out
        assert "Converting to image..." in out
        assert "Analysis complete, redirecting..." in out

        # The display URL is released once the run is over.
        assert len(shared.get_renderer().urls) == 0

    async def test_non_pdf_fails_at_conversion(self, tmp_path: Path) -> None:
        path = tmp_path / "resume.txt"
        path.write_text("plain text resume")
        settings = Settings(storage_root=str(tmp_path / "storage"))
        services = ServicesFactory.create(settings)

        outcome = await analyze(
            settings,
            services,
            AnalysisRequest(document=load_document(path), job=JobContext()),
        )

        assert outcome == Failed(Stage.CONVERT, "Error: File is not a PDF")
        assert (await services.kv.list("resume:*")).data == []


    async def test_record_lookup_uses_configured_timeouts(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        created: list[dict[str, Any]] = []
        repository_cls = main_module.AnalysisRecordRepository

        def recording(*args: Any, **kwargs: Any) -> Any:
            created.append(kwargs)
            return repository_cls(*args, **kwargs)

        monkeypatch.setattr(main_module, "AnalysisRecordRepository", recording)
        settings = Settings(
            storage_root=str(tmp_path / "storage"),
            render_scale=1.0,
            kv_get_timeout_seconds=7,
            kv_set_timeout_seconds=9,
        )
        services = ServicesFactory.create(settings)
        request = AnalysisRequest(document=load_document(resume_on_disk), job=JobContext())

        outcome = await analyze(settings, services, request)

        assert isinstance(outcome, Done)
        assert created == [
            {"key_prefix": "resume", "get_timeout_seconds": 7, "set_timeout_seconds": 9}
        ]

class TestMain:
    def test_exit_code_success(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
        monkeypatch.setenv("RENDER_SCALE", "1.0")
        assert main([str(resume_on_disk), "--title", "Data Engineer"]) == 0

    def test_exit_code_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
        path = tmp_path / "resume.txt"
        path.write_text("not a pdf")
        assert main([str(path)]) == 1

    def test_description_file(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
        monkeypatch.setenv("RENDER_SCALE", "1.0")
        description = tmp_path / "job.txt"
        description.write_text("Own the ingestion platform.")

        assert main([str(resume_on_disk), "--description-file", str(description)]) == 0
        assert '"jobDescription": "Own the ingestion platform."' in capsys.readouterr().out


class TestMainAsync:
    def _patch_lifecycle(self, monkeypatch: pytest.MonkeyPatch) -> dict[str, AsyncMock]:
        mocks = {
            "init_pool": AsyncMock(),
            "close_pool": AsyncMock(),
            "analyze": AsyncMock(return_value=Done("rec-1")),
        }
        for name, mock in mocks.items():
            monkeypatch.setattr(main_module, name, mock)
        mocks["ensure_schema"] = AsyncMock()
        monkeypatch.setattr(PostgresKeyValueStore, "ensure_schema", mocks["ensure_schema"])
        return mocks

    def _make_request(self, resume_on_disk: Path) -> AnalysisRequest:
        return AnalysisRequest(document=load_document(resume_on_disk), job=JobContext())

    async def test_postgres_kv_prepares_and_closes_pool(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mocks = self._patch_lifecycle(monkeypatch)
        settings = Settings(kv_provider="postgres", storage_root=str(tmp_path))

        outcome = await _main_async(settings, self._make_request(resume_on_disk))

        assert outcome == Done("rec-1")
        mocks["init_pool"].assert_awaited_once_with(settings)
        mocks["ensure_schema"].assert_awaited_once()
        mocks["close_pool"].assert_awaited_once()

    async def test_schema_failure_still_closes_pool(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mocks = self._patch_lifecycle(monkeypatch)
        mocks["ensure_schema"].side_effect = RuntimeError("permission denied")
        settings = Settings(kv_provider="postgres", storage_root=str(tmp_path))

        with pytest.raises(RuntimeError, match="permission denied"):
            await _main_async(settings, self._make_request(resume_on_disk))

        mocks["analyze"].assert_not_awaited()
        mocks["close_pool"].assert_awaited_once()

    async def test_memory_kv_skips_pool(
        self,
        tmp_path: Path,
        resume_on_disk: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        mocks = self._patch_lifecycle(monkeypatch)
        settings = Settings(storage_root=str(tmp_path))

        await _main_async(settings, self._make_request(resume_on_disk))

        mocks["init_pool"].assert_not_awaited()
        mocks["ensure_schema"].assert_not_awaited()
        mocks["close_pool"].assert_not_awaited()
        mocks["analyze"].assert_awaited_once()
