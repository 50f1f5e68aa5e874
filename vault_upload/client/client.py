"""
Cliente de subida al vault de Aras Innovator
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Optional, Union

import httpx

from vault_upload.client.auth import BasicAuthProvider, OAuthAuthProvider
from vault_upload.client.http import RequestClient
from vault_upload.client.transaction import TransactionCoordinator
from vault_upload.core.config import config
from vault_upload.core.exceptions import VaultProtocolError
from vault_upload.monitoring.metrics import record_upload_operation
from vault_upload.shared.models import AuthHeaders, CommitResult, Credentials
from vault_upload.shared.payload import FilePayload
from vault_upload.shared.protocols import AuthProvider, Payload

logger = logging.getLogger(__name__)


class VaultClient:
    """Cliente para subir archivos al vault con transacciones."""

    def __init__(
        self,
        credentials: Credentials,
        timeout: Optional[float] = None,
        chunk_size: Optional[int] = None,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        auth_provider: Optional[AuthProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.timeout = config.request_timeout if timeout is None else timeout
        self.chunk_size = config.chunk_size if chunk_size is None else chunk_size
        self.max_attempts = config.max_attempts if max_attempts is None else max_attempts

        self.http = RequestClient(
            timeout=self.timeout,
            max_attempts=self.max_attempts,
            retry_delay=retry_delay,
            transport=transport,
        )
        self.auth_provider = auth_provider or OAuthAuthProvider(self.http)

    @classmethod
    def with_basic_auth(cls, credentials: Credentials, **kwargs) -> "VaultClient":
        """Solo para servidores antiguos; la autenticación básica está obsoleta."""
        return cls(credentials, auth_provider=BasicAuthProvider(), **kwargs)

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "VaultClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def new_transfer(self) -> TransactionCoordinator:
        """Cada transferencia tiene su propio content_id y transaction_id."""
        return TransactionCoordinator(
            self.http,
            self.credentials.server_url,
            self.chunk_size,
            max_attempts=self.max_attempts,
        )

    async def upload(
        self,
        source: Union[str, Path, Payload],
        progress_callback: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> CommitResult:
        """
        Sube un archivo al vault.

        Args:
            source: Ruta local o Payload ya abierto
            progress_callback: Función callback para progreso (opcional)
            cancel_event: Evento que cancela la subida entre chunks (opcional)

        Returns:
            El item File registrado por el commit
        """
        if isinstance(source, Payload):
            return await self._upload_payload(source, progress_callback, cancel_event)

        logger.info(f"Iniciando upload: {source} -> {self.credentials.server_url}")
        with FilePayload.open(source) as payload:
            return await self._upload_payload(payload, progress_callback, cancel_event)

    async def _upload_payload(
        self,
        payload: Payload,
        progress_callback: Optional[Callable[[float], None]],
        cancel_event: Optional[asyncio.Event],
    ) -> CommitResult:
        transfer = self.new_transfer()
        logger.info(f"Nueva transferencia para {payload.name}: file_id={transfer.content_id}")

        started = time.monotonic()
        try:
            result = await transfer.run(
                self.auth_provider,
                self.credentials,
                payload,
                cancel_event=cancel_event,
                progress_callback=progress_callback,
            )
        except Exception as e:
            logger.error(f"Error en upload de {payload.name}: {e}")
            record_upload_operation(False)
            raise

        record_upload_operation(True, time.monotonic() - started)
        return result

    async def authenticate(self) -> AuthHeaders:
        """Obtiene headers de auth sin iniciar una transferencia."""
        return await self.auth_provider.obtain_auth_headers(self.credentials)

    async def get_file(self, content_id: str) -> dict:
        """Obtiene el item File registrado con el id indicado."""
        auth_headers = await self.authenticate()
        url = f"{self.credentials.server_url}/server/odata/file('{content_id}')"

        response = await self.http.send("GET", url, headers=auth_headers.extend())
        try:
            return response.json()
        except ValueError as e:
            raise VaultProtocolError(f"Respuesta inválida para file('{content_id}'): {e}") from e

