"""
Calc Engine — FastAPI Server
============================

RESTful API for running catalog calculator tools and ad-hoc configurations.

Endpoints:
    GET  /health                        Health check / readiness probe
    GET  /tools                         List catalog tools
    POST /tools/{tool_ref}/calculate    Run a catalog tool
    POST /tools/{tool_ref}/validate     Pre-flight check of tool inputs
    GET  /tools/{tool_ref}/examples     Worked examples with results
    POST /calculate                     Run an ad-hoc configuration

`tool_ref` is a numeric tool id or a slug; near-miss slugs are fuzzy-matched.

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from calc_engine import __version__
from calc_engine.catalog import Tool, load_tools, resolve_tool, suggest_tool, worked_examples
from calc_engine.config import configure_logging, load_settings
from calc_engine.engine import CalculationEngine
from calc_engine.exceptions import CalcEngineError
from calc_engine.models import InputValue, ResultValue, ValidationResult
from calc_engine.registry import registered_names

logger = logging.getLogger(__name__)


# ─── Application Lifespan (load catalog) ────────────────────────────

_engine: CalculationEngine | None = None
_tools: list[Tool] | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Read settings, configure logging and load the tool catalog on startup."""
    global _engine, _tools  # noqa: PLW0603
    settings = load_settings()
    configure_logging(settings)
    _tools = load_tools(settings.tools_path)
    _engine = CalculationEngine(strict=settings.strict, default_language=settings.default_language)
    yield
    _engine = None
    _tools = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Calc Engine API",
    description=(
        "Declarative calculator tools: algebraic formulas plus registered "
        "functions (number to words, text case, BMI), evaluated from JSON "
        "configuration."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class CalculateRequest(BaseModel):
    """Request body for running a catalog tool."""

    inputs: dict[str, Optional[InputValue]] = Field(
        default_factory=dict,
        description="Input values keyed by input key. Missing or empty values use defaults.",
        json_schema_extra={"example": {"number": "1500", "mode": "currency_vat", "vatRate": "20"}},
    )
    language: Optional[str] = Field(
        None, description="Overrides the tool's language (e.g. 'ru')."
    )


class AdHocCalculateRequest(BaseModel):
    """Request body for /calculate: a full configuration plus inputs."""

    config: dict[str, Any] = Field(
        ...,
        json_schema_extra={"example": {
            "inputs": [{"key": "celsius", "default": 20}],
            "formulas": {"fahrenheit": "celsius * 9 / 5 + 32"},
        }},
    )
    inputs: dict[str, Optional[InputValue]] = Field(default_factory=dict)


class CalculateResponse(BaseModel):
    tool_id: Optional[int] = None
    slug: Optional[str] = None
    match_confidence: Optional[float] = None
    result: dict[str, ResultValue]


class ToolSummary(BaseModel):
    tool_id: int
    slug: str
    name: str
    description: str
    inputs: list[str]
    outputs: list[str]


class ExampleOut(BaseModel):
    inputs: dict[str, InputValue]
    result: dict[str, ResultValue]


class ExamplesResponse(BaseModel):
    tool_id: int
    slug: str
    examples: list[ExampleOut]


class HealthResponse(BaseModel):
    status: str
    version: str
    tools_loaded: int
    functions: list[str]


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_engine() -> CalculationEngine:
    if _engine is None:
        raise HTTPException(status_code=503, detail="Engine not initialised")
    return _engine


def _get_tools() -> list[Tool]:
    if _tools is None:
        raise HTTPException(status_code=503, detail="Tool catalog not loaded")
    return _tools


def _resolve(tool_ref: str) -> tuple[Tool, float]:
    tools = _get_tools()
    match = resolve_tool(tool_ref, tools)
    if match is None:
        raise HTTPException(
            status_code=404,
            detail={
                "code": "TOOL_NOT_FOUND",
                "message": f"No tool matches {tool_ref!r}",
                "suggestion": suggest_tool(tool_ref, tools),
            },
        )
    return match.tool, match.confidence


def _error_detail(exc: CalcEngineError) -> dict[str, Any]:
    return {"code": exc.code, "message": str(exc), "details": exc.details}


# ─── Endpoints ───────────────────────────────────────────────────────


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Catalog not yet loaded"}},
)
def health_check() -> HealthResponse:
    """Returns service status and registry info."""
    tools = _get_tools()
    return HealthResponse(
        status="healthy",
        version=__version__,
        tools_loaded=len(tools),
        functions=registered_names(),
    )


@app.get("/tools", summary="List catalog tools", tags=["Tools"])
def list_tools() -> list[ToolSummary]:
    return [
        ToolSummary(
            tool_id=tool.tool_id,
            slug=tool.slug,
            name=tool.name,
            description=tool.description,
            inputs=[spec.key for spec in tool.config.inputs],
            outputs=[spec.key for spec in tool.config.outputs],
        )
        for tool in _get_tools()
    ]


@app.post(
    "/tools/{tool_ref}/calculate",
    summary="Run a catalog tool",
    tags=["Tools"],
    responses={404: {"description": "No tool matches the reference"}},
)
def calculate_tool(tool_ref: str, request: CalculateRequest) -> CalculateResponse:
    """Evaluate a catalog tool against the supplied inputs.

    Per-output failures do not fail the request: a broken formula reports 0
    and a failing function contributes no fields.
    """
    tool, confidence = _resolve(tool_ref)
    config = tool.config
    if request.language:
        config = config.model_copy(update={"language": request.language})

    try:
        result = _get_engine().calculate(config, request.inputs)
    except CalcEngineError as exc:
        raise HTTPException(status_code=422, detail=_error_detail(exc))

    return CalculateResponse(
        tool_id=tool.tool_id, slug=tool.slug, match_confidence=confidence, result=result
    )


@app.post(
    "/tools/{tool_ref}/validate",
    summary="Check tool inputs before calculating",
    tags=["Tools"],
    responses={404: {"description": "No tool matches the reference"}},
)
def validate_tool(tool_ref: str, request: CalculateRequest) -> ValidationResult:
    """Report missing and non-numeric inputs, one error per input."""
    tool, _ = _resolve(tool_ref)
    return _get_engine().validate(tool.config, request.inputs)


@app.get(
    "/tools/{tool_ref}/examples",
    summary="Worked examples for a tool",
    tags=["Tools"],
    responses={404: {"description": "No tool matches the reference"}},
)
def tool_examples(tool_ref: str) -> ExamplesResponse:
    tool, _ = _resolve(tool_ref)
    examples = worked_examples(tool, _get_engine())
    return ExamplesResponse(
        tool_id=tool.tool_id,
        slug=tool.slug,
        examples=[ExampleOut(inputs=ex.inputs, result=ex.result) for ex in examples],
    )


@app.post(
    "/calculate",
    summary="Run an ad-hoc configuration",
    tags=["Calculation"],
    responses={422: {"description": "Configuration is invalid"}},
)
def calculate_adhoc(request: AdHocCalculateRequest) -> CalculateResponse:
    """Evaluate a configuration supplied in the request body."""
    try:
        result = _get_engine().calculate(request.config, request.inputs)
    except CalcEngineError as exc:
        logger.info("Rejected ad-hoc configuration: %s", exc)
        raise HTTPException(status_code=422, detail=_error_detail(exc))
    return CalculateResponse(result=result)
