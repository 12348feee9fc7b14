"""
EventTrip API - Main FastAPI application
"""
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventtrip import __version__
from eventtrip.data.registry import event_registry
from eventtrip.utils.config import settings
from eventtrip.utils.logger import get_logger

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="EventTrip API",
    description="Event-anchored itinerary planning",
    version=__version__,
)

# CORS middleware - allow frontend to call our API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "EventTrip API",
        "status": "running",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "api": "ok",
        "catalog_events": len(event_registry.get_all_events()),
        "llm_provider": settings.llm_provider,
    }


# Import and include routers
from eventtrip.routes.events import router as events_router
from eventtrip.routes.itinerary import router as itinerary_router

app.include_router(events_router)
app.include_router(itinerary_router)

logger.info("app_started", environment=settings.environment, version=__version__)
