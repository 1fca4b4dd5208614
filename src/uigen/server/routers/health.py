from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from uigen.schemas.api import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    generator = request.app.state.generator
    model = getattr(getattr(generator, "client", None), "model", "") or ""
    return HealthResponse(status="ok", backend=generator.name, model=model)


@router.get("/api/generate")
async def backend_health(request: Request):
    """Health of the configured generator, as the browser client polls it."""
    try:
        return await request.app.state.generator.health()
    except Exception:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "error": "Backend not reachable"},
        )
