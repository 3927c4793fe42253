import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plastic_audit.core.api_client import BackendClient
from plastic_audit.core.config import config
from plastic_audit.core.error_handler import global_exception_handler
from plastic_audit.core.response_interceptor import (
    SuccessResponseInterceptor,
    CustomAPIRoute,
)
from plastic_audit.modules.audits import WizardRegistry
from plastic_audit.modules.audits import router as wizard_router
from plastic_audit.modules.reduction_promises import router as reduction_promises_router
from plastic_audit.modules.reviews import router as reviews_router
from plastic_audit.modules.uploads import router as uploads_router

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = BackendClient()
    app.state.backend_client = client
    app.state.wizard_registry = WizardRegistry(client)
    logger.info(f"🚀 Starting Plastic Audit API against {config.backend_url}")
    try:
        yield
    finally:
        await client.aclose()
        logger.info("Backend client closed")


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(
        title="Plastic Audit API",
        description="School plastic waste audits, results and reduction promises",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if config.is_production else "/docs",
        redoc_url=None if config.is_production else "/redoc",
    )

    app.router.route_class = CustomAPIRoute

    # Add global exception handler
    app.add_exception_handler(Exception, global_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add Success Response Interceptor (must be added after CORS)
    app.add_middleware(SuccessResponseInterceptor)

    # Include routers with /api prefix
    app.include_router(wizard_router, prefix="/api")
    app.include_router(uploads_router, prefix="/api")
    app.include_router(reduction_promises_router, prefix="/api")
    app.include_router(reviews_router, prefix="/api")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
