"""
SiteScore FastAPI Application — main entry point.
Heuristic SEO scoring for a single URL: on-page factors, readability,
keyword density and robots/sitemap probes.
"""
import logging
import sys, asyncio
from contextlib import asynccontextmanager

if sys.platform == 'win32':
    asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import connect_db, close_db, get_db
from .middleware.rate_limit import RateLimitMiddleware
from .routers.analyze_router import router as analyze_router
from .routers.history_router import router as history_router
from .routers.export_router import router as export_router
from .utils.history_store import history

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await connect_db()
    except Exception as e:
        logger.warning("MongoDB not available — using in-memory history: %s", e)
        await close_db()
    history.init(get_db(), settings.history_limit)

    yield

    await close_db()


app = FastAPI(
    title="SiteScore API",
    description=(
        "**SiteScore** — heuristic SEO scoring for any website\n\n"
        "- On-page factors (title, meta description, headings, images, links)\n"
        "- Content word count, readability and keyword density\n"
        "- robots.txt / sitemap.xml probes and load time\n"
        "- Recent-analysis history and JSON export\n"
    ),
    version="1.0.0",
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(RateLimitMiddleware)

_dev_origins = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]
_extra_origins = [o.strip() for o in settings.extra_allowed_origins.split(",") if o.strip()]

ALLOWED_ORIGINS = _extra_origins + (
    _dev_origins if settings.environment != "production" else []
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(analyze_router)
app.include_router(history_router)
app.include_router(export_router)


@app.get("/", tags=["Health"])
async def root():
    return {"service": "SiteScore API", "version": app.version, "status": "running", "docs": "/docs"}


@app.api_route("/health", methods=["GET", "HEAD"], tags=["Health"])
async def health():
    return {
        "status": "ok",
        "history_store": history.backend,
        "history_limit": history.limit,
        "fetch_mode": settings.fetch_mode,
        "environment": settings.environment,
    }
