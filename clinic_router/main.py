import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clinic_router.config import Settings, get_settings
from clinic_router.routes import health_check, timenow, tool_router
from clinic_router.services.faults import install_fault_watchers
from clinic_router.services.router import ToolRouter
from clinic_router.services.seed import build_seed_slots
from clinic_router.services.store import ClinicStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    )


def create_app(settings: Optional[Settings] = None, store: Optional[ClinicStore] = None) -> FastAPI:
    """
    Build the FastAPI app. The store is created from seed slots at startup
    unless one is passed in (tests hand in their own).
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown lifecycle"""
        install_fault_watchers()

        start = time.time()
        clinic_store = store if store is not None else ClinicStore(build_seed_slots(settings))
        app.state.tool_router = ToolRouter(clinic_store, settings)
        logger.info(
            "✅ Tool router ready with %d slots in %.2fms",
            len(clinic_store.slots), (time.time() - start) * 1000,
        )

        yield  # <-- application runs here

        logger.info("🛑 Shutting down app...")

    app = FastAPI(title="Clinic Tool Router", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def internal_fault_handler(request: Request, exc: Exception):
        logger.error("❌ Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": {"message": str(exc) or "Internal server error"}})

    app.include_router(health_check.router)
    app.include_router(tool_router.router)
    app.include_router(timenow.router)

    return app


app = create_app()


def run():
    settings = get_settings()
    logger.info("⏰ clinic tool router starting on :%d", settings.port)
    uvicorn.run(app, host=settings.app_host, port=settings.port)


if __name__ == "__main__":
    run()
