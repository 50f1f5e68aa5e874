"""Excepciones personalizadas para el cliente de vault"""

from typing import Optional


class VaultError(Exception):
    """Excepción base para todos los errores del cliente"""

    pass


class VaultValidationError(VaultError):
    """Entrada inválida o incompleta (nunca llega al núcleo de transferencia)"""

    pass


class VaultAuthError(VaultError):
    """Falló el descubrimiento OAuth o el intercambio de token"""

    pass


class VaultTransportError(VaultError):
    """Una llamada HTTP agotó todos sus intentos"""

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        status_text: str = "",
        attempts: int = 0,
    ):
        self.url = url
        self.status = status
        self.status_text = status_text
        self.attempts = attempts

        if status is None:
            detail = status_text or "sin respuesta"
        else:
            detail = f"{status} ({status_text})"
        super().__init__(f"{detail} desde {url} después de {attempts} intentos")


class VaultProtocolError(VaultError):
    """Respuesta del servidor malformada o sin el campo esperado"""

    pass


class VaultCommitError(VaultError):
    """
    El commit falló después de subir todos los chunks.

    La transacción queda abierta en el servidor y no hay forma de
    recuperarla desde el cliente.
    """

    def __init__(self, message: str, transaction_id: str, content_id: str):
        self.transaction_id = transaction_id
        self.content_id = content_id
        super().__init__(
            f"{message} (transaction_id={transaction_id}, file_id={content_id})"
        )


class VaultCancelledError(VaultError):
    """La transferencia fue cancelada por el usuario"""

    pass


class VaultConfigurationError(VaultError):
    """Error de configuración"""

    pass
