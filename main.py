from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from aha_api.api.api import api_router
from aha_api.core.config import load_settings
from aha_api.core.context import AppContext, create_context
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

PROJECT_NAME = "AHA AI"
API_PREFIX = "/api"


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When no context is given, settings are loaded and MongoDB is connected
    on startup; any failure there terminates the process.
    """
    app = FastAPI(
        title=f"{PROJECT_NAME} API",
        description="Registration, login and text generation. Only the free plan is rate limited.",
        version="1.0.0",
        docs_url="/api-docs",
        redoc_url=None,
        openapi_url="/api-docs/openapi.json",
        # Serve "/api/users/" directly instead of redirecting
        redirect_slashes=False
    )
    app.state.context = context

    @app.on_event("startup")
    async def startup_context():
        if app.state.context is not None:
            return
        settings = load_settings()
        try:
            app.state.context = await create_context(settings)
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            sys.exit(1)
        logger.info(f"Server: http://localhost:{settings.PORT}")
        logger.info(f"Swagger: http://localhost:{settings.PORT}/api-docs")

    @app.on_event("shutdown")
    async def shutdown_context():
        if app.state.context is not None:
            await app.state.context.close()

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown routes and unsupported methods both read as "not found"
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "not found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc!r}")
        return JSONResponse(status_code=500, content={"error": "server error"})

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API router
    app.include_router(api_router, prefix=API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": f"Welcome to {PROJECT_NAME} API",
            "docs": "/api-docs",
            "version": "1.0.0"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    # Fail before binding the port if configuration is incomplete
    port = load_settings().PORT
    uvicorn.run("main:app", host="0.0.0.0", port=port)
