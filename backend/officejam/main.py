"""Main FastAPI application"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
import logging

from officejam.config import settings
from officejam.database import init_db
from officejam.api import history, queue, realtime, videos
from officejam.services.broadcaster import Broadcaster
from officejam.services.metadata_resolver import MetadataResolver
from officejam.services.playback_timer import PlaybackTimer
from officejam.services.queue_engine import QueueEngine
from officejam.services.queue_store import QueueStore
from officejam.services.session_gateway import SessionGateway
from officejam.services.store_writer import StoreWriter

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    # Startup
    logger.info("Starting OfficeJam queue server...")

    # Initialize database; a broken store degrades to an in-memory queue
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.error(f"Failed to initialize database: {e}")

    store = QueueStore()
    writer = StoreWriter(store)
    engine = QueueEngine(writer)
    engine.restore(store)

    broadcaster = Broadcaster()
    engine.add_listener(broadcaster.publish)
    gateway = SessionGateway(engine, broadcaster)

    timer = None
    if settings.auto_advance_seconds > 0:
        timer = PlaybackTimer(engine, settings.auto_advance_seconds, lambda: gateway.advance("timer"))
        engine.add_listener(timer)
        logger.info(f"Auto-advance enabled after {settings.auto_advance_seconds}s")

    app.state.store = store
    app.state.writer = writer
    app.state.engine = engine
    app.state.broadcaster = broadcaster
    app.state.gateway = gateway
    app.state.resolver = MetadataResolver()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if timer:
        timer.cancel()
    for session in list(broadcaster.sessions):
        await gateway.disconnect(session)
    writer.close()


# Create FastAPI app
app = FastAPI(
    title="OfficeJam Queue API",
    description="Shared media queue with real-time sync",
    version="0.1.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(realtime.router)
app.include_router(queue.router)
app.include_router(videos.router)
app.include_router(history.router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "OfficeJam Queue API",
        "version": "0.1.0",
        "docs": "/docs",
        "websocket": "/ws"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "officejam.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
