"""FastAPI application entrypoint for modext service mode."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..evaluation import EvaluationFileError, parse_evaluation
from ..fixup.reconcile import DEFAULT_FIX_COMMAND
from ..logging import get_logger
from ..metadata.errors import ExtensionMetadataError

_logger = get_logger("service")


class ExtensionRef(BaseModel):
    bzl_file: str
    name: str


class ProxyPayload(BaseModel):
    file: str
    name: str = ""
    dev_dependency: bool = False
    imports: Union[Dict[str, str], List[str]] = Field(default_factory=dict)
    line: int = 0
    column: int = 0


class CheckRequest(BaseModel):
    extension: ExtensionRef
    generated_repos: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    proxies: List[ProxyPayload]
    fix_command: str = DEFAULT_FIX_COMMAND


class CheckResponse(BaseModel):
    status: str
    fixup: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str


def create_app() -> FastAPI:
    """Create the FastAPI application exposing modext checks."""
    app = FastAPI(title="modext Service", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/check", response_model=CheckResponse)
    async def check(payload: CheckRequest) -> CheckResponse:
        document = payload.model_dump(exclude={"fix_command"})
        evaluation = parse_evaluation(document)
        fixup = evaluation.check(fix_command=payload.fix_command)
        if fixup is None:
            return CheckResponse(status="ok")
        _logger.debug("Returning fixup for %s", evaluation.usage.extension_name)
        return CheckResponse(status="fixup", fixup=fixup.to_dict())

    @app.exception_handler(ExtensionMetadataError)
    async def metadata_error_handler(
        _: Any, exc: ExtensionMetadataError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"detail": exc.message, "kind": exc.kind.value}
        )

    @app.exception_handler(EvaluationFileError)
    async def evaluation_error_handler(
        _: Any, exc: EvaluationFileError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
