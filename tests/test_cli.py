"""
Tests del CLI con click.testing.CliRunner
"""

import json

import pytest
from click.testing import CliRunner

import vault_upload.client.cli as cli_module
from vault_upload.client.cli import cli
from vault_upload.client.client import VaultClient
from vault_upload.shared.utils import hash_password

from conftest import SERVER_URL, form_fields

BASE_ARGS = [
    "--server-url", SERVER_URL,
    "--database", "InnovatorSolutions",
    "-u", "admin",
    "--password", "innovator",
]


@pytest.fixture
def runner(server, monkeypatch):
    """Fixture que conecta el CLI al servidor falso"""

    class MockedVaultClient(VaultClient):
        def __init__(self, credentials, **kwargs):
            kwargs.setdefault("retry_delay", 0)
            super().__init__(credentials, transport=server.transport, **kwargs)

    monkeypatch.setattr(cli_module, "VaultClient", MockedVaultClient)
    return CliRunner()


@pytest.fixture
def local_file(tmp_path):
    path = tmp_path / "plano final.pdf"
    path.write_bytes(b"p" * 25000)
    return path


def test_upload_exitoso(runner, server, local_file):
    """Test: sube el archivo y muestra el id registrado"""
    result = runner.invoke(cli, BASE_ARGS + ["upload", str(local_file)])

    assert result.exit_code == 0, result.output
    content_id = server.uploads[0]["file_id"]
    assert f"Archivo 'plano final.pdf' subido con id '{content_id}'" in result.output
    assert len(server.uploads) == 3
    assert len(server.commits) == 1


def test_password_se_envia_hasheado(runner, server, local_file):
    """Test: el CLI hashea el password antes de pedir el token"""
    runner.invoke(cli, BASE_ARGS + ["upload", str(local_file)])

    token_request = next(r for r in server.requests if r.url.path.endswith("/connect/token"))
    assert form_fields(token_request)["password"] == hash_password("innovator")


def test_chunk_size_por_opcion(runner, server, local_file):
    """Test: --chunk-size cambia la cantidad de chunks"""
    result = runner.invoke(
        cli, BASE_ARGS + ["upload", str(local_file), "--chunk-size", "5000"]
    )

    assert result.exit_code == 0, result.output
    assert len(server.uploads) == 5


def test_commit_fallido(runner, server, local_file):
    """Test: un commit fallido se informa aparte y termina con error"""
    server.commit_status = 500

    result = runner.invoke(
        cli, BASE_ARGS + ["upload", str(local_file), "--max-attempts", "1"]
    )

    assert result.exit_code == 1
    assert "commit falló" in result.output
    assert len(server.uploads) == 3


def test_chunk_fallido(runner, server, local_file):
    """Test: un chunk fallido termina con error sin commit"""
    server.upload_statuses = [500]

    result = runner.invoke(
        cli, BASE_ARGS + ["upload", str(local_file), "--max-attempts", "1"]
    )

    assert result.exit_code == 1
    assert "500" in result.output
    assert server.commits == []


def test_usuario_faltante(runner, server, local_file):
    """Test: sin usuario no se contacta al servidor"""
    args = ["--server-url", SERVER_URL, "--database", "InnovatorSolutions", "-u", ""]

    result = runner.invoke(cli, args + ["upload", str(local_file)])

    assert result.exit_code == 1
    assert "nombre de usuario" in result.output
    assert server.requests == []


def test_metrics_file(runner, local_file, tmp_path):
    """Test: --metrics-file escribe el archivo de métricas"""
    metrics_path = tmp_path / "metrics.prom"

    result = runner.invoke(
        cli,
        BASE_ARGS + ["upload", str(local_file), "--metrics-file", str(metrics_path)],
    )

    assert result.exit_code == 0, result.output
    assert metrics_path.exists()


def test_info(runner, server):
    """Test: info muestra el item File como JSON"""
    result = runner.invoke(cli, BASE_ARGS + ["info", "ABC123"])

    assert result.exit_code == 0, result.output
    # Los logs van a stderr; el JSON es lo último que se imprime
    item = json.loads(result.output[result.output.index("{\n"):])
    assert item["id"] == "ABC123"


@pytest.mark.parametrize(
    "option, value",
    [
        ("--chunk-size", "-5"),
        ("--chunk-size", "0"),
        ("--max-attempts", "0"),
        ("--max-attempts", "-1"),
        ("--timeout", "0"),
    ],
)
def test_opciones_fuera_de_rango(runner, server, local_file, option, value):
    """Test: valores inválidos se rechazan antes de contactar al servidor"""
    result = runner.invoke(cli, BASE_ARGS + ["upload", str(local_file), option, value])

    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
    assert option in result.output
    assert server.requests == []


def test_info_valida_configuracion(runner, server, monkeypatch):
    """Test: info también rechaza una configuración inválida"""
    monkeypatch.setattr(cli_module.config, "chunk_size", 0)

    result = runner.invoke(cli, BASE_ARGS + ["info", "ABC123"])

    assert result.exit_code == 1
    assert "VAULT_CHUNK_SIZE" in result.output
    assert server.requests == []
