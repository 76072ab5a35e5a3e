"""Gunicorn configuration for FastAPI/ASGI runtime."""

import os

# Ensure ASGI worker is used even when start command is `gunicorn app.main:app`.
worker_class = "uvicorn.workers.UvicornWorker"

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"

workers = int(os.getenv("WEB_CONCURRENCY", "1"))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))
# Matches the in-flight request drain window on SIGTERM
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
