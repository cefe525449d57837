"""
StratifyAI Core - FastAPI application behind the desktop thinking tool.
Exposes the desktop command surface: connectivity ping, thinking path
generation and execution, and CSV analysis through the Gemini API.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import commands
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    app_logger.info(f"{Config.APP_TITLE} using model {Config.GEMINI_MODEL}")
    yield
    await HTTPClientManager.close_all()

app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

# The UI is served from a different origin (the static server)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with user-friendly messages"""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}")
    app_logger.error(f"Errors: {errors}")

    if errors:
        first_error = errors[0]
        error_type = first_error.get('type', '')
        field = first_error.get('loc', [])[-1] if first_error.get('loc') else 'field'
        message = f"{field}: {first_error.get('msg', 'Validation error')}"

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": [{
                    "msg": message,
                    "type": error_type,
                    "loc": list(first_error.get('loc', []))
                }]
            },
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": []},
    )

#root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": f"{Config.APP_TITLE} is running", "api_key_configured": Config.has_api_key()}

app.include_router(commands.router, tags=["commands"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.API_HOST, port=Config.API_PORT)
