"""
Módulos core del cliente de vault
"""

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
from vault_upload.core.logging import setup_logging

__all__ = [
    "config",
    "VaultConfig",
    "VaultError",
    "VaultValidationError",
    "VaultAuthError",
    "VaultTransportError",
    "VaultProtocolError",
    "VaultCommitError",
    "VaultCancelledError",
    "VaultConfigurationError",
    "setup_logging",
]
