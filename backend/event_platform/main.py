"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from event_platform.config import settings
from event_platform.database import Base, engine
from event_platform.errors import AppError, InvalidInput

# Import routers
from event_platform.routers import users, organizations, events, drafts, templates

# Import all models so Base.metadata knows about them
from event_platform.models.user import User                                # noqa: F401
from event_platform.models.organization import Organization, OrgMember     # noqa: F401
from event_platform.models.event import Event                              # noqa: F401
from event_platform.models.ticket_tier import TicketTier                   # noqa: F401
from event_platform.models.payout_account import PayoutAccount             # noqa: F401
from event_platform.models.event_template import EventTemplate             # noqa: F401
from event_platform.models.event_draft import EventDraft                   # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Platform",
    description="Event creation, drafts and templates for individual and organization creators",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = InvalidInput("Invalid request body", details=exc.errors())
    return JSONResponse(status_code=error.status_code, content=jsonable_encoder(error.to_dict()))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    body = {"error": "Internal server error", "code": "internal-error"}
    if not settings.is_production:
        body["details"] = str(exc)
    return JSONResponse(status_code=500, content=body)


# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(organizations.router, prefix="/api/orgs", tags=["Organizations"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(drafts.router, prefix="/api/drafts", tags=["Drafts"])
app.include_router(templates.router, prefix="/api/templates", tags=["Templates"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
