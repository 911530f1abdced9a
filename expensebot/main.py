"""
expensebot/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Creates the record store and chat service (startup/shutdown)
- Registers API routes (event webhook, approval callbacks)
- No business logic should be written here
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from expensebot.core.config import get_settings, validate_settings
from expensebot.core.errors import add_exception_handlers
from expensebot.core.logging import setup_logging, get_logger
from expensebot.db.kvstore import MemoryKVBackend, MongoKVBackend
from expensebot.db.mongo import connect_to_mongo, close_mongo_connection, get_kv_collection
from expensebot.services.chat_service import get_chat_service, close_chat_service
from expensebot.services.record_store import RecordStore
from expensebot.api import expenses, webhook

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    settings = get_settings()
    logger.info("Starting ExpenseBot...")

    try:
        validate_settings(settings)
        logger.info("Configuration validated")

        if settings.STORE_BACKEND == "mongo":
            await connect_to_mongo()
            backend = MongoKVBackend(get_kv_collection())
        else:
            logger.warning("Using in-memory record store, data is lost on restart")
            backend = MemoryKVBackend()

        app.state.record_store = RecordStore(backend)
        app.state.chat = get_chat_service()

        logger.info(f"ExpenseBot started (environment={settings.ENVIRONMENT}, store={settings.STORE_BACKEND})")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield

    logger.info("Shutting down ExpenseBot...")

    try:
        await close_chat_service()
        await close_mongo_connection()
        logger.info("ExpenseBot shut down")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="ExpenseBot",
    description="Chat-based expense submission and approval",
    version=VERSION,
    lifespan=lifespan,
    debug=get_settings().DEBUG,
    docs_url="/docs" if get_settings().is_development else None,
    redoc_url="/redoc" if get_settings().is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


app.include_router(webhook.router, prefix=get_settings().API_PREFIX, tags=["Webhook"])
app.include_router(expenses.router, prefix="/api", tags=["Expenses"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "ExpenseBot API",
        "version": VERSION,
        "description": "Chat-based expense submission and approval",
        "status": "running",
        "environment": get_settings().ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint.
    Checks record store connectivity.
    """
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
        "checks": {}
    }

    store = getattr(request.app.state, "record_store", None)
    store_healthy = store is not None and await store.ping()
    health_status["checks"]["record_store"] = "healthy" if store_healthy else "unhealthy"
    if not store_healthy:
        health_status["status"] = "unhealthy"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    store = getattr(request.app.state, "record_store", None)
    if store is not None and await store.ping():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "record_store_unavailable"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "expensebot.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().is_development,
        log_level=get_settings().LOG_LEVEL.lower()
    )
