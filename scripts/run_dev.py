"""
Development server launcher.

Loads .env, optionally brings the schema up to date with Alembic, and
runs the API with uvicorn in reload mode.

Usage:
    python scripts/run_dev.py
    MIGRATE=1 PORT=8080 python scripts/run_dev.py
"""

import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

import uvicorn
from alembic import command
from alembic.config import Config

from app.core.config import settings


def migrate() -> None:
    command.upgrade(Config(str(project_root / "alembic.ini")), "head")


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    if os.getenv("MIGRATE") == "1":
        migrate()

    print("=" * 60)
    print(f"{settings.PROJECT_NAME} {settings.VERSION}")
    print(f"API:  http://localhost:{port}/api/v1")
    print(f"Docs: http://localhost:{port}/docs")
    print("=" * 60)

    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=True, log_level=settings.LOG_LEVEL.lower())
