"""Envío de requests HTTP con reintentos acotados por número de intentos."""

import asyncio
import logging
from typing import Optional, Sequence, Tuple, Union

import httpx

from vault_upload.core.config import config
from vault_upload.core.exceptions import VaultTransportError
from vault_upload.monitoring.metrics import record_http_attempt

logger = logging.getLogger(__name__)

HeaderList = Sequence[Tuple[str, str]]


class RequestClient:
    """
    Envía una request y la repite mientras queden intentos.

    Solo HTTP 200 resuelve la llamada. Cualquier otro status, un timeout
    o un error de conexión consume un intento; la request se reenvía
    idéntica (mismo método, url, headers y body).
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        max_retry_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = config.request_timeout if timeout is None else timeout
        self.max_attempts = config.max_attempts if max_attempts is None else max_attempts
        self.retry_delay = config.retry_delay if retry_delay is None else retry_delay
        self.max_retry_delay = (
            config.max_retry_delay if max_retry_delay is None else max_retry_delay
        )
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RequestClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[HeaderList] = None,
        body: Optional[Union[bytes, str]] = None,
        max_attempts: Optional[int] = None,
    ) -> httpx.Response:
        """
        Envía la request con reintentos.

        Args:
            method: Método HTTP
            url: URL absoluta
            headers: Pares (nombre, valor), en orden
            body: Contenido de la request (opcional)
            max_attempts: Intentos totales; por defecto el del cliente

        Returns:
            La respuesta HTTP 200

        Raises:
            VaultTransportError: Si se agotan los intentos
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError(f"max_attempts debe ser al menos 1 (actual: {attempts})")

        request_headers = list(headers or [])
        status: Optional[int] = None
        status_text = ""

        for attempt in range(1, attempts + 1):
            logger.debug(f"{method} {url} (intento {attempt}/{attempts})")

            try:
                response = await self._client.request(
                    method, url, headers=request_headers, content=body
                )
            except httpx.TimeoutException as e:
                status, status_text = None, f"timeout: {e}"
                record_http_attempt(method, "timeout")
                logger.warning(f"Timeout en {method} {url} (intento {attempt}/{attempts})")
            except httpx.RequestError as e:
                status, status_text = None, f"error de conexión: {e}"
                record_http_attempt(method, "error")
                logger.warning(
                    f"Error de conexión en {method} {url} (intento {attempt}/{attempts}): {e}"
                )
            else:
                if response.status_code == 200:
                    record_http_attempt(method, "ok")
                    return response

                status, status_text = response.status_code, response.reason_phrase
                record_http_attempt(method, "status")
                if 400 <= status < 500:
                    logger.warning(
                        f"Error de cliente {status} ({status_text}) en {method} {url} "
                        f"(intento {attempt}/{attempts})"
                    )
                else:
                    logger.warning(
                        f"{status} ({status_text}) en {method} {url} "
                        f"(intento {attempt}/{attempts})"
                    )

            if attempt < attempts:
                await self._wait_before_retry(attempt)

        logger.error(f"{method} {url} falló después de {attempts} intentos")
        raise VaultTransportError(url, status, status_text, attempts)

    def retry_delay_for(self, attempt: int) -> float:
        """Backoff exponencial acotado por max_retry_delay."""
        if self.retry_delay <= 0:
            return 0.0
        return min(self.retry_delay * 2 ** (attempt - 1), self.max_retry_delay)

    async def _wait_before_retry(self, attempt: int) -> None:
        delay = self.retry_delay_for(attempt)
        if delay <= 0:
            return
        logger.debug(f"Reintentando en {delay:.2f}s")
        await asyncio.sleep(delay)
