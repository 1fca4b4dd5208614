import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from uigen.library.components import COMPONENT_LIBRARY
from uigen.library.validator import validate_component_usage
from uigen.schemas.api import (
    FrontendGenerateRequest,
    FrontendGenerateResponse,
    GenerateRequest,
    GenerateResponse,
    ValidateRequest,
)
from uigen.schemas.generation import ComponentDefinition, ValidationResult

router = APIRouter(tags=["generate"])

logger = logging.getLogger(__name__)


@router.post("/api/v1/generate", response_model=GenerateResponse)
async def generate(req: GenerateRequest, request: Request):
    """Run one generation; errors map to 400/422/502/500 via the app's handlers."""
    if not req.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    try:
        result = await request.app.state.generator.generate(req.prompt, req.current_code)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return GenerateResponse(
        code=result.code,
        explanation=result.explanation,
        plan=result.plan.model_dump(by_alias=True),
        component_usage=result.component_usage,
        validation=result.validation,
    )


@router.post("/api/generate", response_model=FrontendGenerateResponse)
async def generate_for_frontend(req: FrontendGenerateRequest, request: Request):
    """Browser-facing route: camelCase body, ``{error}`` on failure."""
    if not req.prompt or not req.prompt.strip():
        return JSONResponse(status_code=400, content={"error": "Prompt is required"})

    try:
        result = await request.app.state.generator.generate(req.prompt, req.current_code)
    except Exception as exc:
        logger.exception("Generation error")
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "Failed to generate UI"},
        )

    return FrontendGenerateResponse(
        code=result.code,
        explanation=result.explanation,
        plan=result.plan.model_dump(by_alias=True),
    )


@router.get("/api/v1/components", response_model=list[ComponentDefinition])
async def components():
    return list(COMPONENT_LIBRARY.values())


@router.post("/api/v1/validate", response_model=ValidationResult)
async def validate(req: ValidateRequest):
    return validate_component_usage(req.code)
