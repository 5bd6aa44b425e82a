import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routers import games
from .exceptions import DomainException, ProblemDetail
from .config import API_PREFIX, ALLOWED_ORIGINS, ALLOW_CREDENTIALS, MAX_GAMES, MAX_PLAYERS
from .utils.sentry import init_sentry

logger = logging.getLogger(__name__)

SENTRY_ENABLED = init_sentry()

# -----------------------------------------------------------------------------
# FastAPI app
# -----------------------------------------------------------------------------
app = FastAPI(
    title="Bowling Scorekeeper API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS is only needed when a browser front-end is served from another origin
if ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    logger.info("ALLOWED_ORIGINS not set; CORS middleware disabled.")

logger.info("API_PREFIX=%r", API_PREFIX)
logger.info("BOWLING_MAX_PLAYERS=%d BOWLING_MAX_GAMES=%d", MAX_PLAYERS, MAX_GAMES)

# -----------------------------------------------------------------------------
# Health checks
# -----------------------------------------------------------------------------
@app.get("/healthz", tags=["health"])  # Unprefixed for reverse proxy / uptime checks
def root_healthz():
    return {"status": "ok"}


# -----------------------------------------------------------------------------
# Error handling
# -----------------------------------------------------------------------------
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    problem = ProblemDetail(
        type=exc.type,
        title=exc.title,
        detail=exc.detail,
        status=exc.status_code,
        code=exc.code,
        instance=str(request.url.path),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    code = getattr(exc, "code", f"http_{exc.status_code}")
    problem = ProblemDetail(
        title=detail,
        detail=detail,
        status=exc.status_code,
        code=code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", exc_info=(type(exc), exc, exc.__traceback__))
    problem = ProblemDetail(
        title="Internal Server Error",
        status=500,
        detail=str(exc),
        code="internal_server_error",
    )
    return JSONResponse(
        status_code=500,
        content=problem.model_dump(),
        media_type="application/problem+json",
    )

# -----------------------------------------------------------------------------
# Routers
# -----------------------------------------------------------------------------
api_router = APIRouter(prefix=API_PREFIX, tags=["meta"])


@api_router.get("/healthz", tags=["health"])
def api_healthz():
    return {"status": "ok"}


@api_router.get("")
def api_root():
    return {"message": "Bowling Scorekeeper API. See /docs."}


v0_router = APIRouter(prefix="/v0")
v0_router.include_router(games.router)

api_router.include_router(v0_router)
app.include_router(api_router)
