"""
HTTP client utilities with connection pooling.
Provides a reusable httpx client for model provider calls.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages the shared httpx client with connection pooling."""

    _model_client: httpx.AsyncClient | None = None

    @classmethod
    def get_model_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for model provider calls.

        Features:
        - Connection pooling (reuses TCP connections to the provider)
        - HTTP/2 when the provider negotiates it
        - No request timeout; a pending call waits until the provider answers

        Returns:
            Configured httpx.AsyncClient for generateContent requests
        """
        if cls._model_client is None:
            limits = httpx.Limits(
                max_connections=10,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._model_client = httpx.AsyncClient(
                timeout=Config.MODEL_TIMEOUT,
                follow_redirects=True,
                limits=limits,
                http2=True
            )

        return cls._model_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._model_client is not None:
            await cls._model_client.aclose()
            cls._model_client = None
