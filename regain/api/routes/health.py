"""Health check endpoints."""
from fastapi import APIRouter

from regain.config.settings import get_settings
from regain.llm import get_llm_provider

router = APIRouter(prefix="/health", tags=["health"])
settings = get_settings()


@router.get("")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


@router.get("/llm")
async def llm_health_check():
    """Check LLM provider availability."""
    provider = get_llm_provider()
    is_healthy = await provider.health_check()

    return {
        "status": "healthy" if is_healthy else "unhealthy",
        "provider": settings.llm_provider,
        "model": settings.openai_model,
    }
