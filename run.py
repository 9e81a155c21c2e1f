"""
Uvicorn server runner for the thread summary bot.

Usage:
    python run.py

Environment variables (set in .env file):
    DEBUG=true - Enable debug logging and auto-reload
    PORT=3000 - Set server port (default: 3000)
    HOST=0.0.0.0 - Set server host (default: 127.0.0.1)

Point the Slack app's Interactivity URL at /api/slack/interactions and the
/search and /chat slash commands at /api/slack/commands.
"""

import os

import uvicorn

from app.config import get_settings

REQUIRED_SETTINGS = {
    "SLACK_BOT_TOKEN": "slack_bot_token",
    "SLACK_SIGNING_SECRET": "slack_signing_secret",
    "GITHUB_TOKEN": "github_token",
    "GITHUB_REPO_OWNER": "github_repo_owner",
    "GITHUB_REPO_NAME": "github_repo_name",
}


def main():
    settings = get_settings()

    missing = [env for env, field in REQUIRED_SETTINGS.items() if not getattr(settings, field)]
    if missing:
        raise SystemExit(f"Missing required settings: {', '.join(missing)}. Check your .env file.")

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "3000"))
    log_level = "debug" if settings.debug else "info"

    print(f"Starting {settings.app_name} server...")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Log Level: {log_level}")
    print(f"Archive: {settings.github_repo_owner}/{settings.github_repo_name}@{settings.github_default_branch}")
    print(f"Search: {settings.knowledge_base_path or 'disabled'}")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=settings.debug,
        log_level=log_level,
        access_log=True,
    )


if __name__ == "__main__":
    main()
