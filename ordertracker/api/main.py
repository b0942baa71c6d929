"""
Order Tracker API - Main FastAPI Application.

Serves the browser UI and the JSON API it talks to.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from ordertracker import __version__
from ordertracker.config import Settings, get_settings
from ordertracker.utils.logging import setup_logging

# Load environment variables
load_dotenv()

# Configure logging early
setup_logging("order-tracker")

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    settings = get_settings()
    print("🚚 Starting Order Tracker...")
    print(f"   AI chat: {'enabled (' + settings.model + ')' if settings.ai_enabled else 'disabled'}")
    print(f"   Carrier tracking: {'enabled' if settings.carrier_enabled else 'links only'}")
    print(f"   Email: {'enabled' if settings.email_enabled else 'disabled'}")
    print(f"   Gmail scan: {'enabled' if settings.gmail_enabled else 'disabled'}")

    yield

    print("👋 Shutting down Order Tracker...")


# OpenAPI tag descriptions (shown in /docs and /openapi.json)
OPENAPI_TAGS = [
    {"name": "tracking", "description": "Demo order and carrier tracking"},
    {"name": "orders", "description": "Order views, ETA, returns and the admin advance action"},
    {"name": "subscriptions", "description": "Email subscriptions to order updates"},
    {"name": "chat", "description": "Rule-based and AI chat assistant"},
    {"name": "ingest", "description": "Find tracking numbers in emails"},
    {"name": "system", "description": "Health, feature flags and the browser UI"},
]

app = FastAPI(
    title="Order Tracker API",
    description=(
        "Order tracking demo: status lookups with a live map, optional carrier "
        "tracking, chat assistance and email notifications."
    ),
    version=__version__,
    lifespan=lifespan,
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["system"], include_in_schema=False)
async def index():
    """Serve the browser UI."""
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health", tags=["system"], operation_id="healthCheck")
async def health_check():
    """Check service health status."""
    return {"status": "healthy", "service": "order-tracker", "version": __version__}


@app.get("/api/config", tags=["system"], operation_id="getConfig")
async def get_config(settings: Settings = Depends(get_settings)):
    """Feature flags the browser UI uses to decide what to show."""
    config = {
        "ai": settings.ai_enabled,
        "carrier": settings.carrier_enabled,
        "map": settings.map_mode,
        "email": settings.email_enabled,
        "gmail": settings.gmail_enabled,
        "stream": True,
        "streamIntervalSeconds": settings.stream_interval_seconds,
    }
    if settings.map_mode == "google" and settings.gmaps_api_key:
        config["gmapsApiKey"] = settings.gmaps_api_key
    return config


# Import and include routers
from ordertracker.api.routes import chat, ingest, orders, stream, subscriptions, track

app.include_router(track.router, prefix="/api", tags=["tracking"])
app.include_router(stream.router, prefix="/api", tags=["tracking"])
app.include_router(orders.router, prefix="/api", tags=["orders"])
app.include_router(subscriptions.router, prefix="/api", tags=["subscriptions"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(ingest.router, prefix="/api", tags=["ingest"])

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


def main() -> None:
    """Run the server with uvicorn (``ordertracker-server``)."""
    settings = get_settings()
    logger.info(
        "Starting server",
        extra={
            "json_fields": {
                "host": settings.host,
                "port": settings.port,
                "ai": settings.ai_enabled,
                "carrier": settings.carrier_enabled,
            }
        },
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
