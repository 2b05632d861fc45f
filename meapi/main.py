import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from meapi.core import db, settings
from meapi.core.logs import configure_logging
from meapi.profile import router as profile_router
from meapi.profile import seed
from meapi.projects import router as projects_router
from meapi.search import router as search_router
from meapi.skills import router as skills_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    # Open the store once per process; schema and seed run before any request.
    store = await db.init_store()
    try:
        await store.init_schema()
        await seed.seed_if_empty(store)
        yield
    finally:
        await db.close_store()


app = FastAPI(title="me-api", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request method=%s path=%s status=%s duration_ms=%.1f",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


app.include_router(profile_router.router, tags=["profile"])
app.include_router(projects_router.router, tags=["projects"])
app.include_router(skills_router.router, tags=["skills"])
app.include_router(search_router.router, tags=["search"])


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "ts": _utc_timestamp()}


@app.get("/")
def root() -> dict:
    return {"message": "me-api"}
