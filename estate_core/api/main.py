"""
FastAPI app assembly: logging, middleware, router and error-handler wiring.
"""
import logging
import os

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from estate_core.utils.settings import get_settings

# Configure logging
LOG_LEVEL_NAME = get_settings().log_level
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from estate_core.api.activity import feed_router as activity_feed_router
from estate_core.api.activity import router as activity_router
from estate_core.api.documents import router as documents_router
from estate_core.api.errors import register_exception_handlers
from estate_core.api.estates import router as estates_router
from estate_core.api.invites import router as invites_router
from estate_core.api.invoices import router as invoices_router
from estate_core.api.notes import router as notes_router
from estate_core.api.tasks import router as tasks_router
from estate_core.utils.runtime import dev_mode_active

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Estate Service",
    description="API for managing estates, their collaborators, records and activity history.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:3000").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware: reject writes that carry no forwarded identity
@app.middleware("http")
async def enforce_readonly_for_guests(request: Request, call_next):
    if request.method in ("POST", "PUT", "PATCH", "DELETE") and not dev_mode_active():
        h = request.headers
        user_present = (
            h.get("x-auth-request-user")
            or h.get("x-auth-request-email")
            or h.get("x-forwarded-user")
            or h.get("x-forwarded-email")
        )
        if not user_present:
            return JSONResponse(
                {"detail": "Sign in to perform changes."},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
    return await call_next(request)


register_exception_handlers(app)

app.include_router(estates_router)
app.include_router(invites_router)
app.include_router(activity_router)
app.include_router(activity_feed_router)
app.include_router(notes_router)
app.include_router(tasks_router)
app.include_router(documents_router)
app.include_router(invoices_router)


@app.get("/health")
def health():
    return {"status": "ok"}
