import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from vault_upload.core.exceptions import VaultConfigurationError

load_dotenv()


@dataclass
class VaultConfig:
    """Configuración centralizada del cliente de vault"""

    # Conexión
    server_url: str = os.getenv("VAULT_SERVER_URL", "http://localhost/InnovatorServer")
    database: str = os.getenv("VAULT_DATABASE", "")
    username: str = os.getenv("VAULT_USERNAME", "")

    # Configuración de Chunk
    chunk_size: int = int(os.getenv("VAULT_CHUNK_SIZE", "10000"))  # bytes por llamada

    # Reintentos y timeouts
    max_attempts: int = int(os.getenv("VAULT_MAX_ATTEMPTS", "5"))
    request_timeout: float = float(os.getenv("VAULT_REQUEST_TIMEOUT", "30.0"))
    retry_delay: float = float(os.getenv("VAULT_RETRY_DELAY", "0.5"))
    max_retry_delay: float = float(os.getenv("VAULT_MAX_RETRY_DELAY", "10.0"))

    # OAuth
    oauth_scope: str = os.getenv("VAULT_OAUTH_SCOPE", "Innovator")
    oauth_client_id: str = os.getenv("VAULT_OAUTH_CLIENT_ID", "IOMApp")

    # Monitoring
    enable_metrics: bool = os.getenv("VAULT_ENABLE_METRICS", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("VAULT_LOG_LEVEL", "INFO")
    log_format: str = os.getenv("VAULT_LOG_FORMAT", "detailed")
    log_file: Optional[str] = os.getenv("VAULT_LOG_FILE") or None

    def validate(self) -> "VaultConfig":
        """Verifica que los valores numéricos tengan sentido"""
        if self.chunk_size < 1:
            raise VaultConfigurationError(
                f"VAULT_CHUNK_SIZE debe ser positivo (actual: {self.chunk_size})"
            )
        if self.max_attempts < 1:
            raise VaultConfigurationError(
                f"VAULT_MAX_ATTEMPTS debe ser al menos 1 (actual: {self.max_attempts})"
            )
        if self.request_timeout <= 0:
            raise VaultConfigurationError(
                f"VAULT_REQUEST_TIMEOUT debe ser positivo (actual: {self.request_timeout})"
            )
        if self.retry_delay < 0 or self.max_retry_delay < 0:
            raise VaultConfigurationError("Los delays de reintento no pueden ser negativos")
        return self


# Configuración global
config = VaultConfig()
