import asyncio
import json
import logging
import sys
from typing import Optional

import click

from vault_upload.client.client import VaultClient
from vault_upload.core.config import config
from vault_upload.core.exceptions import VaultCommitError, VaultError
from vault_upload.core.logging import setup_logging
from vault_upload.monitoring.metrics import write_metrics
from vault_upload.shared.payload import FilePayload
from vault_upload.shared.protocols import Notifier
from vault_upload.shared.utils import format_bytes, hash_password, validate_credentials

logger = logging.getLogger(__name__)


def setup_cli(verbose: bool = False):
    """Configuración centralizada del CLI"""
    setup_logging("DEBUG" if verbose else None)


def progress_bar(progress: float):
    """Muestra una barra de progreso"""
    bar_length = 40
    filled = int(bar_length * progress / 100)
    bar = "=" * filled + "-" * (bar_length - filled)
    print(f"\r[{bar}] {progress:.1f}%", end="", flush=True)


class ClickNotifier(Notifier):
    """Muestra el resultado de la subida en la terminal"""

    def report_success(self, message: str) -> None:
        click.echo(click.style(f"✓ {message}", fg="green"))

    def report_error(self, message: str) -> None:
        click.echo(click.style(f"✗ {message}", fg="red"), err=True)


class VaultContext:
    """Contexto compartido para comandos CLI"""

    def __init__(
        self,
        server_url: str,
        database: str,
        username: str,
        password: Optional[str],
        verbose: bool = False,
    ):
        self.server_url = server_url
        self.database = database
        self.username = username
        self.password = password
        self.verbose = verbose
        self.notifier = ClickNotifier()

    def credentials(self):
        """Lee y valida las credenciales; el password se hashea aquí."""
        password = self.password
        if not password and self.username:
            password = click.prompt("Password", hide_input=True, default="", show_default=False)
        return validate_credentials(
            self.server_url,
            self.database,
            self.username,
            hash_password(password) if password else None,
        )


@click.group()
@click.option("--server-url", default=config.server_url, help="URL del servidor Innovator")
@click.option("--database", default=config.database, help="Base de datos")
@click.option("--username", "-u", default=config.username, help="Usuario")
@click.option(
    "--password",
    envvar="VAULT_PASSWORD",
    default=None,
    help="Password en texto plano (se pide si no se indica)",
)
@click.option("--verbose", "-v", is_flag=True, help="Logging verbose")
@click.pass_context
def cli(ctx, server_url: str, database: str, username: str, password: Optional[str], verbose: bool):
    """Vault Upload - Subida transaccional de archivos al vault"""
    setup_cli(verbose)
    ctx.obj = VaultContext(server_url, database, username, password, verbose)


@cli.command()
@click.argument("local_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--chunk-size",
    type=click.IntRange(min=1),
    default=None,
    help="Tamaño máximo de chunk en bytes",
)
@click.option(
    "--max-attempts",
    type=click.IntRange(min=1),
    default=None,
    help="Intentos por llamada HTTP",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Timeout por intento (segundos)",
)
@click.option(
    "--basic-auth",
    is_flag=True,
    help="Autenticación básica obsoleta (solo servidores antiguos)",
)
@click.option("--metrics-file", type=click.Path(dir_okay=False), default=None,
              help="Escribe las métricas de Prometheus en este archivo")
@click.pass_context
def upload(
    ctx,
    local_path: str,
    chunk_size: Optional[int],
    max_attempts: Optional[int],
    timeout: Optional[float],
    basic_auth: bool,
    metrics_file: Optional[str],
):
    """Sube un archivo al vault"""
    notifier = ctx.obj.notifier

    try:
        config.validate()
        credentials = ctx.obj.credentials()
    except VaultError as e:
        notifier.report_error(str(e))
        sys.exit(1)

    options = dict(chunk_size=chunk_size, max_attempts=max_attempts, timeout=timeout)
    if basic_auth:
        client = VaultClient.with_basic_auth(credentials, **options)
    else:
        client = VaultClient(credentials, **options)

    async def do_upload():
        try:
            with FilePayload.open(local_path) as payload:
                click.echo(
                    f"Subiendo {payload.name} ({format_bytes(payload.size)}) "
                    f"-> {credentials.server_url}"
                )
                result = await client.upload(payload, progress_callback=progress_bar)
            print()  # Nueva línea después de la barra de progreso
            return result
        finally:
            await client.close()

    try:
        result = asyncio.run(do_upload())
    except VaultCommitError as e:
        print()
        notifier.report_error(f"Los chunks se subieron pero el commit falló: {e}")
        sys.exit(1)
    except VaultError as e:
        print()
        notifier.report_error(str(e))
        sys.exit(1)
    finally:
        if metrics_file:
            write_metrics(metrics_file)

    notifier.report_success(f"Archivo '{result.filename}' subido con id '{result.id}'")


@cli.command()
@click.argument("content_id")
@click.pass_context
def info(ctx, content_id: str):
    """Muestra el item File registrado con CONTENT_ID"""
    notifier = ctx.obj.notifier

    try:
        config.validate()
        credentials = ctx.obj.credentials()
    except VaultError as e:
        notifier.report_error(str(e))
        sys.exit(1)

    async def do_info():
        async with VaultClient(credentials) as client:
            return await client.get_file(content_id)

    try:
        item = asyncio.run(do_info())
    except VaultError as e:
        notifier.report_error(str(e))
        sys.exit(1)

    click.echo(json.dumps(item, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli(obj={})
