"""FastAPI application entry point for the assessment engine."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.config import get_settings

app = FastAPI(
    title="Assessment Engine",
    description="Scores multi-rater (360) assessments and maintains agency benchmarks",
    version="0.1.0",
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Liveness check; also reports which environment the service runs in."""
    return JSONResponse(
        content={"status": "ok", "environment": get_settings().ASSESSMENT_ENGINE_ENV},
        status_code=200,
    )


# Scoring and benchmark routes
app.include_router(api_router, prefix="/v1", tags=["v1"])
