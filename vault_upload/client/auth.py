"""
Proveedores de autenticación para las llamadas al vault
"""

import logging
import warnings
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ValidationError

from vault_upload.client.http import RequestClient
from vault_upload.core.config import config
from vault_upload.core.exceptions import VaultAuthError, VaultTransportError
from vault_upload.shared.models import (
    AuthHeaders,
    Credentials,
    OAuthDiscovery,
    OpenIDConfiguration,
    TokenResponse,
)
from vault_upload.shared.protocols import AuthProvider

logger = logging.getLogger(__name__)

DISCOVERY_PATH = "/Server/OAuthServerDiscovery.aspx"
OPENID_CONFIGURATION_PATH = ".well-known/openid-configuration"


def _parse(model: type[BaseModel], response: httpx.Response, step: str):
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        raise VaultAuthError(f"Respuesta inválida en {step}: {e}") from e


class OAuthAuthProvider(AuthProvider):
    """
    Obtiene un token bearer con el flujo de descubrimiento OAuth.

    1. GET {server}/Server/OAuthServerDiscovery.aspx -> locations[0].uri
    2. GET {uri}.well-known/openid-configuration -> token_endpoint
    3. POST password grant al token_endpoint -> access_token
    """

    def __init__(
        self,
        http: RequestClient,
        scope: Optional[str] = None,
        client_id: Optional[str] = None,
    ):
        self.http = http
        self.scope = scope or config.oauth_scope
        self.client_id = client_id or config.oauth_client_id

    async def obtain_auth_headers(self, credentials: Credentials) -> AuthHeaders:
        token = await self.get_token(credentials)
        return AuthHeaders.bearer(token)

    async def get_token(self, credentials: Credentials) -> str:
        """Ejecuta el intercambio completo y devuelve el access_token."""
        try:
            token_url = await self._get_token_endpoint(credentials.server_url)

            body = urlencode(
                {
                    "grant_type": "password",
                    "scope": self.scope,
                    "client_id": self.client_id,
                    "username": credentials.username,
                    "password": credentials.password,
                    "database": credentials.database,
                }
            )
            logger.info(f"Solicitando token para {credentials.username} en {token_url}")
            response = await self.http.send(
                "POST",
                token_url,
                headers=[("content-type", "application/x-www-form-urlencoded")],
                body=body,
            )
        except VaultTransportError as e:
            raise VaultAuthError(f"Error obteniendo token OAuth: {e}") from e

        token = _parse(TokenResponse, response, "token").access_token
        if not token:
            raise VaultAuthError("El token endpoint devolvió un access_token vacío")
        return token

    async def _get_token_endpoint(self, server_url: str) -> str:
        discovery = await self.http.send("GET", f"{server_url}{DISCOVERY_PATH}")
        oauth_url = _parse(OAuthDiscovery, discovery, "discovery").locations[0].uri
        logger.debug(f"Servidor OAuth: {oauth_url}")

        metadata = await self.http.send("GET", f"{oauth_url}{OPENID_CONFIGURATION_PATH}")
        return _parse(OpenIDConfiguration, metadata, "openid-configuration").token_endpoint


class BasicAuthProvider(AuthProvider):
    """
    Obsoleto e inseguro: envía usuario, password y base de datos en headers.

    Innovator 12.0 no soporta autenticación básica. Usar solo contra
    servidores antiguos y seleccionándolo de forma explícita.
    """

    def __init__(self):
        warnings.warn(
            "BasicAuthProvider está obsoleto; usar OAuthAuthProvider",
            DeprecationWarning,
            stacklevel=2,
        )

    async def obtain_auth_headers(self, credentials: Credentials) -> AuthHeaders:
        logger.warning("Usando autenticación básica (obsoleta)")
        return AuthHeaders.basic(credentials)
