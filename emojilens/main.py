import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from emojilens.core.config import settings
from emojilens.core.logging_config import configure_logging
from emojilens.api.v1.endpoints.auth import router as auth_router
from emojilens.api.v1.endpoints.emoji import router as emoji_router
from emojilens.api.v1.endpoints.repositories import router as repositories_router
from emojilens.api.v1.endpoints.testgen import router as testgen_router
from emojilens.api.v1.endpoints.users import router as users_router

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    if not settings.github_client_id or not settings.github_client_secret:
        logger.warning("GitHub OAuth credentials not configured - test generator sign-in will not work")
    if not settings.gemini_api_key:
        logger.warning("Gemini API key not configured - test generation will fail")
    logger.info(f"{settings.app_name} started")

    yield

    # Shutdown
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(emoji_router, prefix="/api/v1")
app.include_router(repositories_router, prefix="/api/v1")
app.include_router(testgen_router, prefix="/api/v1")


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
def health():
    return {"status": "ok"}
