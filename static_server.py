"""
Static content server for local development of the desktop UI.
Serves files beneath Config.STATIC_ROOT over plain HTTP GET.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response

from config import Config
from services.static_files import StaticFileService
from utils.logger import static_logger


def create_static_app(service: Optional[StaticFileService] = None) -> FastAPI:
    """
    Build the static server application.

    Args:
        service: File service to serve from (defaults to Config.STATIC_ROOT)

    Returns:
        FastAPI app with a single catch-all GET route
    """
    static_files = service or StaticFileService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        static_logger.info(f"Static server running at http://localhost:{Config.STATIC_PORT}/ (root: {static_files.root})")
        yield

    # Docs routes are disabled so every path reaches the file handler
    app = FastAPI(
        title=f"{Config.APP_TITLE} Static Server",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )

    @app.get("/{full_path:path}")
    async def serve_static(request: Request, full_path: str):
        """Resolve the still-encoded request path and return the file."""
        raw_path = request.scope.get("raw_path")
        request_path = raw_path.decode("latin-1") if raw_path else request.url.path

        result = await static_files.handle(request_path)
        static_logger.debug(f"GET {request_path} -> {result.status}")

        return Response(
            content=result.body,
            status_code=result.status,
            headers={"Content-Type": result.content_type}
        )

    return app


app = create_static_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=Config.STATIC_PORT)
