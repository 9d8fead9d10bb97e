"""FastAPI application entrypoint for codesum service mode."""

from __future__ import annotations

from typing import Any, Callable, List, Literal, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..errors import CodeSumError, report
from ..logging import get_logger
from ..models import SummaryOptions
from ..pipeline import SummaryPipeline

_LOGGER = get_logger("service")


class SummarizeRequest(BaseModel):
    path: str
    output: Optional[str] = None
    batch_size: Optional[int] = Field(default=None, gt=0)
    detail_level: Optional[Literal["low", "medium", "high"]] = None
    max_length: Optional[int] = Field(default=None, gt=0)
    max_file_size: Optional[int] = Field(default=None, gt=0)

    def summary_options(self) -> Optional[SummaryOptions]:
        if self.detail_level is None and self.max_length is None:
            return None
        defaults = SummaryOptions()
        return SummaryOptions(
            detail_level=self.detail_level or defaults.detail_level,
            max_length=self.max_length or defaults.max_length,
        )


class FileSummaryModel(BaseModel):
    relative_path: str
    summary: str


class SummarizeResponse(BaseModel):
    output_path: str
    count: int
    failed: int
    summaries: List[FileSummaryModel]


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> SummaryPipeline:
    return SummaryPipeline()


def create_app(
    pipeline_factory: Callable[[], SummaryPipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing codesum operations."""

    app = FastAPI(title="codesum Service", version="1.0.0")

    async def get_pipeline() -> SummaryPipeline:
        # Instantiate per request so each run stays independent.
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/summarize", response_model=SummarizeResponse)
    async def summarize(
        payload: SummarizeRequest,
        pipeline: SummaryPipeline = Depends(get_pipeline),
    ) -> SummarizeResponse:
        result = await pipeline.arun(
            payload.path,
            payload.output,
            batch_size=payload.batch_size,
            options=payload.summary_options(),
            max_file_size=payload.max_file_size,
        )
        return SummarizeResponse(
            output_path=str(result.output_path),
            count=len(result.summaries),
            failed=result.failed,
            summaries=[
                FileSummaryModel(relative_path=item.relative_path, summary=item.summary)
                for item in result.summaries
            ],
        )

    @app.exception_handler(CodeSumError)
    async def codesum_error_handler(_: Any, exc: CodeSumError) -> JSONResponse:
        details = report(exc, _LOGGER)
        return JSONResponse(
            status_code=details.status,
            content={"message": details.message, "code": details.code},
        )

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
