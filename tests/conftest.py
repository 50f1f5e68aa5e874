"""
Fixtures compartidas: un servidor Innovator falso sobre httpx.MockTransport
"""

import json
import re
from urllib.parse import parse_qs, unquote

import httpx
import pytest

from vault_upload.client.client import VaultClient
from vault_upload.client.http import RequestClient
from vault_upload.shared.models import Credentials
from vault_upload.shared.utils import hash_password

SERVER_URL = "http://vault.test/InnovatorServer"
BASE_PATH = "/InnovatorServer"
OAUTH_URL = "http://vault.test/InnovatorServer/OAuthServer/"
TOKEN_URL = "http://vault.test/InnovatorServer/OAuthServer/connect/token"
ACCESS_TOKEN = "tok-123"


class FakeVaultServer:
    """Simula discovery, token, begin, upload, commit y lectura de File."""

    def __init__(self):
        self.requests = []
        self.uploads = []
        self.commits = []
        self.transaction_count = 0

        # Respuestas configurables por test
        self.discovery_body = {"locations": [{"uri": OAUTH_URL}]}
        self.openid_body = {"token_endpoint": TOKEN_URL}
        self.token_status = 200
        self.token_body = {"access_token": ACCESS_TOKEN, "token_type": "Bearer", "expires_in": 3600}
        self.begin_status = 200
        self.begin_body = None
        self.upload_statuses = []
        self.commit_status = 200
        self.commit_response = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self):
        return [request.url.path for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = unquote(request.url.path)

        if path == f"{BASE_PATH}/Server/OAuthServerDiscovery.aspx":
            return httpx.Response(200, json=self.discovery_body)

        if path == f"{BASE_PATH}/OAuthServer/.well-known/openid-configuration":
            return httpx.Response(200, json=self.openid_body)

        if path == f"{BASE_PATH}/OAuthServer/connect/token":
            return httpx.Response(self.token_status, json=self.token_body)

        if path == f"{BASE_PATH}/vault/odata/vault.BeginTransaction":
            if self.begin_status != 200:
                return httpx.Response(self.begin_status)
            self.transaction_count += 1
            body = self.begin_body or {"transactionId": f"TX-{self.transaction_count}"}
            return httpx.Response(200, json=body)

        if path == f"{BASE_PATH}/vault/odata/vault.UploadFile":
            self.uploads.append(
                {
                    "file_id": request.url.params.get("fileId"),
                    "content_range": request.headers["content-range"],
                    "transaction_id": request.headers["transactionid"],
                    "data": request.content,
                }
            )
            if self.upload_statuses:
                return httpx.Response(self.upload_statuses.pop(0))
            return httpx.Response(200)

        if path == f"{BASE_PATH}/vault/odata/vault.CommitTransaction":
            payload = commit_json(request.content)
            self.commits.append(
                {
                    "transaction_id": request.headers["transactionid"],
                    "content_type": request.headers["content-type"],
                    "body": request.content,
                    "payload": payload,
                }
            )
            if self.commit_status != 200:
                return httpx.Response(self.commit_status)
            if self.commit_response is not None:
                return self.commit_response
            return httpx.Response(
                200, json={"id": payload["id"], "filename": payload["filename"]}
            )

        match = re.fullmatch(rf"{BASE_PATH}/server/odata/file\('(\w+)'\)", path)
        if match and request.method == "GET":
            return httpx.Response(200, json={"id": match.group(1), "filename": "plano.pdf"})

        return httpx.Response(404)


def commit_json(body: bytes) -> dict:
    """Extrae el JSON de la parte application/http del commit"""
    lines = body.decode("utf-8").split("\r\n")
    return json.loads(lines[6])


def form_fields(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


@pytest.fixture
def server():
    """Fixture para el servidor falso"""
    return FakeVaultServer()


@pytest.fixture
def credentials():
    """Fixture para las credenciales de prueba"""
    return Credentials(
        server_url=SERVER_URL,
        database="InnovatorSolutions",
        username="admin",
        password=hash_password("innovator"),
    )


@pytest.fixture
def make_http(server):
    """Fixture que crea RequestClients contra el servidor falso"""

    def factory(**kwargs):
        kwargs.setdefault("retry_delay", 0)
        return RequestClient(transport=server.transport, **kwargs)

    return factory


@pytest.fixture
def make_client(server, credentials):
    """Fixture que crea VaultClients contra el servidor falso"""

    def factory(**kwargs):
        kwargs.setdefault("retry_delay", 0)
        kwargs.setdefault("chunk_size", 10000)
        return VaultClient(credentials, transport=server.transport, **kwargs)

    return factory
