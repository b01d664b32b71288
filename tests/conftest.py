from typing import Any, Callable

import httpx
import pytest

WEB_URL = "https://contoso.sharepoint.com/sites/project-x"
FILE_ID = "b2307a39-e878-458b-bc90-03bc578531d6"
FILE_URL = "/sites/project-x/documents/Test1.docx"


class MockTransport(httpx.BaseTransport):
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={}
        )

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(
            {
                "method": request.method,
                "url": request.url,
                "headers": {k.lower(): v for k, v in request.headers.items()},
            }
        )
        return self.respond(request)


class FakeConfidentialClientApplication:
    instances: list["FakeConfidentialClientApplication"] = []
    result: dict[str, Any] = {"access_token": "token", "expires_in": 3600}

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.scopes: list[list[str]] = []
        type(self).instances.append(self)

    def acquire_token_for_client(self, scopes: list[str]) -> dict[str, Any]:
        self.scopes.append(scopes)
        return dict(type(self).result)


@pytest.fixture(autouse=True)
def clear_microsoft_env(monkeypatch):
    """Remove MICROSOFT_* vars so tests never pick up real credentials."""
    for name in [
        "MICROSOFT_CLIENT_ID",
        "MICROSOFT_CLIENT_SECRET",
        "MICROSOFT_TENANT_ID",
        "MICROSOFT_CERTIFICATE_PATH",
        "MICROSOFT_CERTIFICATE_THUMBPRINT",
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def credentials(monkeypatch):
    monkeypatch.setenv("MICROSOFT_CLIENT_ID", "test-id")
    monkeypatch.setenv("MICROSOFT_CLIENT_SECRET", "test-secret")
    monkeypatch.setenv("MICROSOFT_TENANT_ID", "test-tenant")


@pytest.fixture()
def msal_app(monkeypatch):
    FakeConfidentialClientApplication.instances = []
    FakeConfidentialClientApplication.result = {"access_token": "token", "expires_in": 3600}
    monkeypatch.setattr(
        "spofileget.client.ConfidentialClientApplication", FakeConfidentialClientApplication
    )
    return FakeConfidentialClientApplication


@pytest.fixture()
def transport(monkeypatch):
    transport = MockTransport()
    real_client = httpx.Client
    monkeypatch.setattr(
        "spofileget.client.httpx.Client",
        lambda **kwargs: real_client(transport=transport, **kwargs),
    )
    return transport
