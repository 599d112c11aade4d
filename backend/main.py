"""
Consensus Reality Monitor - FastAPI Backend
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import counter, groups, posts, reports
from config import get_settings
from middleware.auth import require_moderator
from middleware.rate_limit import enforce_rate_limit
from repositories import close_redis_client
from services.reddit_service import close_reddit_service

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s'
)
logger = logging.getLogger('conrealmonitor')


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Consensus Reality Monitor starting ({settings.environment})")
    yield
    await close_reddit_service()
    await close_redis_client()
    logger.info("👋 Connections closed")


app = FastAPI(
    title="Consensus Reality Monitor",
    description="Reality logs, fragmentation index and flair for Reddit communities",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render errors as {status: "error", message} for the client"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# Public endpoints
app.include_router(counter.router)

# Moderator-only endpoints: auth first, then rate limiting
internal_dependencies = [Depends(require_moderator), Depends(enforce_rate_limit)]
app.include_router(groups.router, dependencies=internal_dependencies)
app.include_router(posts.router, dependencies=internal_dependencies)
app.include_router(reports.router, dependencies=internal_dependencies)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/health")
async def api_health():
    return {"status": "ok", "service": "conrealmonitor"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
