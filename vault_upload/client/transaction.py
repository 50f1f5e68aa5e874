"""
Máquina de estados de una transferencia: begin -> upload -> commit
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from vault_upload.client.chunks import count_chunks, plan_chunks
from vault_upload.client.commit import (
    build_commit_body,
    commit_boundary,
    commit_headers,
    parse_commit_response,
)
from vault_upload.client.http import RequestClient
from vault_upload.core.exceptions import (
    VaultCancelledError,
    VaultCommitError,
    VaultError,
    VaultProtocolError,
    VaultValidationError,
)
from vault_upload.monitoring.metrics import record_chunk_write
from vault_upload.shared.models import (
    AuthHeaders,
    BeginTransactionResponse,
    ChunkRange,
    CommitResult,
    Credentials,
    TransferState,
)
from vault_upload.shared.protocols import AuthProvider, Payload
from vault_upload.shared.utils import escape_filename, generate_content_id

logger = logging.getLogger(__name__)


class TransactionCoordinator:
    """
    Conduce una única transferencia al vault.

    Cada instancia tiene su propio content_id (generado al crearla) y el
    transaction_id que asigna el servidor en begin. Al terminar, con éxito
    o con error, la instancia no se puede reutilizar.

    No existe una llamada de rollback: si falla una subida o el commit, la
    transacción queda abierta en el servidor.
    """

    def __init__(
        self,
        http: RequestClient,
        server_url: str,
        chunk_size: int,
        max_attempts: Optional[int] = None,
        content_id: Optional[str] = None,
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size debe ser positivo (actual: {chunk_size})")

        self.http = http
        self.server_url = server_url.rstrip("/")
        self.chunk_size = chunk_size
        self.max_attempts = max_attempts
        self.content_id = content_id or generate_content_id()

        self.state = TransferState.NOT_STARTED
        self.auth_headers: Optional[AuthHeaders] = None
        self.transaction_id: Optional[str] = None
        self.failure_reason: Optional[str] = None

    # URLs

    @property
    def begin_url(self) -> str:
        return f"{self.server_url}/vault/odata/vault.BeginTransaction"

    @property
    def upload_url(self) -> str:
        return f"{self.server_url}/vault/odata/vault.UploadFile?fileId={self.content_id}"

    @property
    def commit_url(self) -> str:
        return f"{self.server_url}/vault/odata/vault.CommitTransaction"

    # Transiciones

    async def authenticate(
        self, provider: AuthProvider, credentials: Credentials
    ) -> AuthHeaders:
        """Obtiene los headers de auth que se reusan en toda la transferencia."""
        self._expect(TransferState.NOT_STARTED)
        self.state = TransferState.AUTHENTICATING

        with self._failing_on_error():
            self.auth_headers = await provider.obtain_auth_headers(credentials)
        return self.auth_headers

    async def begin(self) -> str:
        """Abre la transacción en el servidor y devuelve su id."""
        self._expect(TransferState.AUTHENTICATING)

        with self._failing_on_error():
            response = await self.http.send(
                "POST",
                self.begin_url,
                headers=self.auth_headers.extend(),
                max_attempts=self.max_attempts,
            )
            try:
                parsed = BeginTransactionResponse.model_validate_json(response.content)
            except ValidationError as e:
                raise VaultProtocolError(
                    f"Respuesta de BeginTransaction sin transactionId válido: {e}"
                ) from e

        self.transaction_id = parsed.transaction_id
        self.state = TransferState.TRANSACTION_OPEN
        logger.info(
            f"Transacción abierta: transaction_id={self.transaction_id}, "
            f"file_id={self.content_id}"
        )
        return self.transaction_id

    async def upload_chunk(
        self, chunk: ChunkRange, data: bytes, file_name: str
    ) -> httpx.Response:
        """Sube un chunk; los chunks deben llegar en orden creciente."""
        if self.state == TransferState.TRANSACTION_OPEN:
            self.state = TransferState.UPLOADING
        self._expect(TransferState.UPLOADING)

        with self._failing_on_error():
            if len(data) != chunk.length:
                raise VaultValidationError(
                    f"El chunk {chunk.content_range} tiene {len(data)} bytes, "
                    f"se esperaban {chunk.length}"
                )

        headers = self.auth_headers.extend(
            [
                (
                    "Content-Disposition",
                    f"attachment; filename*=utf-8''{escape_filename(file_name)}",
                ),
                ("Content-Range", chunk.content_range),
                ("Content-Type", "application/octet-stream"),
                ("transactionid", self.transaction_id),
            ]
        )

        with self._failing_on_error():
            try:
                response = await self.http.send(
                    "POST",
                    self.upload_url,
                    headers=headers,
                    body=data,
                    max_attempts=self.max_attempts,
                )
            except VaultError:
                record_chunk_write(False)
                raise

        record_chunk_write(True, len(data))
        return response

    async def upload(
        self,
        payload: Payload,
        cancel_event: Optional[asyncio.Event] = None,
        progress_callback: Optional[Callable[[float], None]] = None,
    ) -> int:
        """
        Sube el payload completo, un chunk a la vez.

        Returns:
            Cantidad de chunks subidos
        """
        self._expect(TransferState.TRANSACTION_OPEN)
        total = count_chunks(payload.size, self.chunk_size)
        logger.info(
            f"Subiendo {payload.name} ({payload.size} bytes) en {total} chunks "
            f"de hasta {self.chunk_size} bytes"
        )

        uploaded = 0
        for chunk in plan_chunks(payload.size, self.chunk_size):
            if cancel_event is not None and cancel_event.is_set():
                self._fail("cancelada por el usuario")
                raise VaultCancelledError(
                    f"Subida cancelada después de {uploaded}/{total} chunks"
                )

            logger.debug(f"Chunk {uploaded + 1}/{total}: {chunk.content_range}")
            with self._failing_on_error():
                data = payload.read(chunk.offset, chunk.last_byte)
            await self.upload_chunk(chunk, data, payload.name)
            uploaded += 1

            if progress_callback:
                progress_callback(uploaded / total * 100)

        # Un archivo vacío no sube ningún chunk y pasa directo al commit
        if self.state == TransferState.TRANSACTION_OPEN:
            self.state = TransferState.UPLOADING
        return uploaded

    async def commit(self, payload: Payload) -> CommitResult:
        """Confirma la transacción y registra el item File."""
        self._expect(TransferState.UPLOADING)
        self.state = TransferState.COMMITTING

        boundary = commit_boundary(self.content_id)
        body = build_commit_body(
            boundary, self.server_url, self.content_id, payload.name, payload.size
        )
        headers = self.auth_headers.extend(commit_headers(boundary, self.transaction_id))

        logger.info(f"Enviando commit para file_id={self.content_id}")
        with self._failing_on_error():
            try:
                response = await self.http.send(
                    "POST",
                    self.commit_url,
                    headers=headers,
                    body=body,
                    max_attempts=self.max_attempts,
                )
            except VaultError as e:
                raise VaultCommitError(
                    f"Commit falló con todos los chunks subidos: {e}",
                    self.transaction_id,
                    self.content_id,
                ) from e

            try:
                result = parse_commit_response(
                    response, self.transaction_id, self.content_id
                )
            except VaultProtocolError as e:
                # El servidor respondió 200: el commit puede haberse aplicado
                raise VaultCommitError(
                    f"No se pudo leer la respuesta del commit: {e}",
                    self.transaction_id,
                    self.content_id,
                ) from e

        self.state = TransferState.COMMITTED
        self.transaction_id = None
        logger.info(f"Commit exitoso: '{result.filename}' con id '{result.id}'")
        return result

    async def run(
        self,
        provider: AuthProvider,
        credentials: Credentials,
        payload: Payload,
        cancel_event: Optional[asyncio.Event] = None,
        progress_callback: Optional[Callable[[float], None]] = None,
    ) -> CommitResult:
        """Ejecuta la transferencia completa: auth, begin, upload y commit."""
        await self.authenticate(provider, credentials)
        await self.begin()
        await self.upload(payload, cancel_event, progress_callback)
        return await self.commit(payload)

    # Helpers

    def _expect(self, state: TransferState) -> None:
        if self.state != state:
            raise RuntimeError(
                f"Transición inválida: estado actual {self.state.value}, "
                f"se esperaba {state.value}"
            )

    def _fail(self, reason: str) -> None:
        self.state = TransferState.FAILED
        self.failure_reason = reason
        logger.error(f"Transferencia {self.content_id} fallida: {reason}")

    @contextmanager
    def _failing_on_error(self):
        try:
            yield
        except Exception as e:
            if self.state != TransferState.FAILED:
                self._fail(str(e) or type(e).__name__)
            raise
