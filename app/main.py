import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.dependencies import get_services
from app.api.routes import slack
from app.config import get_settings

settings = get_settings()

# Configure application logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("app")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

# SDK request logs are only useful when debugging
for noisy in ("slack_sdk", "github", "httpx"):
    logging.getLogger(noisy).setLevel(logging.DEBUG if settings.debug else logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    services = await get_services()
    logger.info(
        f"{settings.app_name} ready (bot user: {services.bot_user_id or 'unknown'}, "
        f"archive: {settings.github_repo_owner}/{settings.github_repo_name}, "
        f"search: {'on' if services.searcher.is_configured else 'off'})"
    )
    yield


app = FastAPI(
    title=settings.app_name,
    description="Slack thread summarization bot",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(slack.router, prefix="/api/slack", tags=["Slack"])


@app.get("/")
async def root():
    return {
        "message": "Thread Summary Bot - Slack thread summaries by AI",
        "version": "0.1.0",
        "endpoints": {
            "interactions": "/api/slack/interactions",
            "commands": "/api/slack/commands",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "search_enabled": bool(settings.knowledge_base_path),
    }
