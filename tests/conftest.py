import pytest
from unittest.mock import AsyncMock


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def api_key(monkeypatch):
    """Configure a dummy Gemini API key."""
    from config import Config
    monkeypatch.setattr(Config, "GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setattr(Config, "GROQ_API_KEY", "")
    return "test-gemini-key"


@pytest.fixture
def mock_http_client(monkeypatch):
    """Mock httpx client handed out by HTTPClientManager."""
    client = AsyncMock()
    client.post = AsyncMock()
    monkeypatch.setattr("utils.http_client.HTTPClientManager.get_model_client", lambda: client)
    return client


@pytest.fixture
def gateway_stub(monkeypatch):
    """Replace ModelGateway.call_model with a recording stub."""
    from services.gateway import ModelGateway
    from tests.fixtures.mock_clients import GatewayStub

    stub = GatewayStub()
    monkeypatch.setattr(ModelGateway, "call_model", stub.call_model)
    return stub


@pytest.fixture
def configured_app(gateway_stub):
    """Command API with the gateway stubbed out."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from routes import commands

    app = FastAPI()
    app.include_router(commands.router)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def static_root(tmp_path):
    """
    Directory tree for static server tests:

        web/index.html, web/styles/site.css, web/app.js, web/logo.PNG,
        web/data.bin, web/docs/index.html, web/empty/, web/my file.txt
        web-private/secret.txt  (sibling sharing the root's prefix)
        secret.txt              (outside the root)
    """
    root = tmp_path / "web"
    root.mkdir()
    (root / "index.html").write_text("<h1>StratifyAI</h1>")
    (root / "styles").mkdir()
    (root / "styles" / "site.css").write_text("body { margin: 0; }")
    (root / "app.js").write_text("console.log('ready');")
    (root / "logo.PNG").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "data.bin").write_bytes(b"\x00\x01\x02")
    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_text("<h1>Docs</h1>")
    (root / "empty").mkdir()
    (root / "my file.txt").write_text("spaced")

    sibling = tmp_path / "web-private"
    sibling.mkdir()
    (sibling / "secret.txt").write_text("sibling secret")

    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def static_service(static_root):
    from services.static_files import StaticFileService
    return StaticFileService(root=str(static_root), strict_containment=False)


@pytest.fixture
def static_client(static_service):
    from fastapi.testclient import TestClient
    from static_server import create_static_app

    with TestClient(create_static_app(static_service)) as client:
        yield client
