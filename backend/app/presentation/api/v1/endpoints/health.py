"""Health check endpoint — no database or provider calls, always available."""

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Service status plus whether search can embed queries at all."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "embedding_model": settings.embedding_model,
        "embeddings_configured": bool(settings.openrouter_api_key.strip()),
    }
