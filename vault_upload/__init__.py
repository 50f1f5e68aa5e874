"""
Vault Upload - Subida transaccional de archivos al vault de Aras Innovator

Abre una transacción en el vault, sube el archivo en chunks con reintentos
y la confirma con un commit multipart.
"""

__version__ = "1.0.0"

# Exportaciones principales
from vault_upload.core.config import config, VaultConfig
from vault_upload.core.exceptions import (
    VaultError,
    VaultValidationError,
    VaultAuthError,
    VaultTransportError,
    VaultProtocolError,
    VaultCommitError,
    VaultCancelledError,
    VaultConfigurationError,
)
from vault_upload.client.client import VaultClient

__all__ = [
    # Configuración
    "config",
    "VaultConfig",

    # Excepciones
    "VaultError",
    "VaultValidationError",
    "VaultAuthError",
    "VaultTransportError",
    "VaultProtocolError",
    "VaultCommitError",
    "VaultCancelledError",
    "VaultConfigurationError",

    # Cliente
    "VaultClient",
]
