"""
Tests de configuración
"""

import pytest

from vault_upload.core.config import VaultConfig
from vault_upload.core.exceptions import VaultConfigurationError


def test_configuracion_por_defecto_valida():
    """Test: los valores por defecto pasan la validación"""
    cfg = VaultConfig(chunk_size=10000, max_attempts=5, request_timeout=30.0)

    assert cfg.validate() is cfg


@pytest.mark.parametrize(
    "overrides",
    [
        {"chunk_size": 0},
        {"max_attempts": 0},
        {"request_timeout": 0},
        {"retry_delay": -1.0},
    ],
)
def test_configuracion_invalida(overrides):
    """Test: valores fuera de rango se rechazan"""
    params = {"chunk_size": 10000, "max_attempts": 5, "request_timeout": 30.0, "retry_delay": 0.5}
    params.update(overrides)

    with pytest.raises(VaultConfigurationError):
        VaultConfig(**params).validate()
