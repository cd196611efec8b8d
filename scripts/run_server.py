"""Run the quotation API with uvicorn.

Usage:
  python scripts/run_server.py

Requirements:
  - DB schema applied (alembic upgrade head)
  - DATABASE_URL configured (e.g., via .env)
"""

import uvicorn

from app.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
