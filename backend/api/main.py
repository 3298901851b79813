"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import search
from settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Search Aggregator API",
    description="Proxies category searches to third-party providers and normalizes the results",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(search.router, prefix="/api", tags=["search"])


@app.on_event("startup")
def startup_event():
    """Warn early when the provider key is missing."""
    if not settings.SERPAPI_KEY:
        logger.warning("SERPAPI_KEY not set; only book searches will succeed.")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Browser UI; mounted last so it does not shadow the API routes
static_path = Path(__file__).resolve().parent.parent / "static"
app.mount("/", StaticFiles(directory=str(static_path), html=True), name="ui")
