"""
App assembly entry point.

Re-exports the FastAPI `app` from `estate_core.api.main` so the service can be
started with `uvicorn app:app`.
"""

from estate_core.api.main import app  # noqa: F401
