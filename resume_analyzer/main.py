"""Command-line entry point.

Usage:
    python -m resume_analyzer.main resume.pdf --title "Data Engineer"
    python -m resume_analyzer.main resume.pdf --company Acme --description-file job.txt
"""

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from resume_analyzer.adapters.factory import Services, ServicesFactory
from resume_analyzer.adapters.postgres_kv import PostgresKeyValueStore
from resume_analyzer.config.settings import Settings
from resume_analyzer.database.connection import close_pool, init_pool
from resume_analyzer.logging.logger import Log
from resume_analyzer.pipeline.models import AnalysisOutcome, AnalysisRequest, Done, JobContext
from resume_analyzer.pipeline.orchestrator import build_orchestrator
from resume_analyzer.rendering.models import SourceDocument
from resume_analyzer.rendering.shared import close_renderer, init_renderer
from resume_analyzer.repositories.analysis_record_repository import AnalysisRecordRepository


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyze a PDF resume against a job description.")
    parser.add_argument("resume", type=Path, help="Path to the resume PDF")
    parser.add_argument("--company", default="", help="Company name")
    parser.add_argument("--title", default="", help="Job title")
    parser.add_argument("--description", default="", help="Job description text")
    parser.add_argument("--description-file", type=Path, help="Read the job description from a file")
    return parser.parse_args(argv)


def load_document(path: Path) -> SourceDocument:
    media_type, _ = mimetypes.guess_type(path.name)
    stat = path.stat()
    return SourceDocument(
        content=path.read_bytes(),
        media_type=media_type or "application/octet-stream",
        name=path.name,
        last_modified=stat.st_mtime,
    )


async def analyze(settings: Settings, services: Services, request: AnalysisRequest) -> AnalysisOutcome:
    """Sign in, run one analysis and print the stored feedback."""
    signed_in = await services.identity.sign_in()
    if signed_in.error is not None:
        raise RuntimeError(f"Sign-in failed: {signed_in.error}")

    renderer = init_renderer(settings)
    orchestrator = build_orchestrator(
        settings,
        storage=services.storage,
        kv=services.kv,
        ai=services.ai,
        renderer=renderer,
    )
    outcome = await orchestrator.run(request, on_status=print)

    # The display URL is only needed while the run is shown.
    rendered = renderer.cached(request.document)
    if rendered is not None:
        renderer.urls.revoke(rendered.url)

    if isinstance(outcome, Done):
        records = AnalysisRecordRepository(
            services.kv,
            key_prefix=settings.record_key_prefix,
            get_timeout_seconds=settings.kv_get_timeout_seconds,
            set_timeout_seconds=settings.kv_set_timeout_seconds,
        )
        record = await records.get(outcome.record_id)
        if record is not None:
            print(json.dumps(record.to_dict(), indent=2))
    return outcome


async def _main_async(settings: Settings, request: AnalysisRequest) -> AnalysisOutcome:
    services = ServicesFactory.create(settings)
    postgres_kv = services.kv if isinstance(services.kv, PostgresKeyValueStore) else None
    if postgres_kv is not None:
        await init_pool(settings)
    try:
        if postgres_kv is not None:
            await postgres_kv.ensure_schema()
        return await analyze(settings, services, request)
    finally:
        close_renderer()
        if postgres_kv is not None:
            await close_pool()


def main(argv: list[str] | None = None) -> int:
    """Entry point: configure -> build services -> run one analysis."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    description = args.description
    if args.description_file is not None:
        description = args.description_file.read_text(encoding="utf-8")
    request = AnalysisRequest(
        document=load_document(args.resume),
        job=JobContext(company_name=args.company, job_title=args.title, job_description=description),
    )

    outcome = asyncio.run(_main_async(settings, request))
    return 0 if isinstance(outcome, Done) else 1


if __name__ == "__main__":
    sys.exit(main())
