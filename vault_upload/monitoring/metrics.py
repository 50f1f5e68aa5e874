"""
Métricas de transferencia del cliente de vault
"""

from typing import Any, Dict

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    write_to_textfile,
)

from vault_upload.core.config import config


# Registry propio para no mezclar con el registry global del proceso
registry = CollectorRegistry()

# ============================================================================
# MÉTRICAS DE SUBIDA
# ============================================================================

upload_operations_total = Counter(
    "vault_upload_operations_total",
    "Total upload operations",
    ["status"],
    registry=registry,
)

upload_duration_seconds = Histogram(
    "vault_upload_duration_seconds",
    "Upload duration in seconds (begin to commit)",
    registry=registry,
    buckets=[0.1, 0.5, 1.0, 5.0, 30.0, 120.0, 600.0],
)

chunk_write_operations_total = Counter(
    "vault_chunk_write_operations_total",
    "Total chunk upload operations",
    ["status"],
    registry=registry,
)

bytes_written_total = Counter(
    "vault_bytes_written_total", "Total bytes uploaded to the vault", registry=registry
)

# ============================================================================
# MÉTRICAS HTTP
# ============================================================================

http_attempts_total = Counter(
    "vault_http_attempts_total",
    "Total HTTP attempts, including retries",
    ["method", "outcome"],
    registry=registry,
)


def record_upload_operation(success: bool, duration: float = 0.0):
    """Registra una operación de upload."""
    if not config.enable_metrics:
        return
    status = "success" if success else "error"
    upload_operations_total.labels(status=status).inc()
    if duration > 0:
        upload_duration_seconds.observe(duration)


def record_chunk_write(success: bool, bytes_written: int = 0):
    """Registra la subida de un chunk."""
    if not config.enable_metrics:
        return
    status = "success" if success else "error"
    chunk_write_operations_total.labels(status=status).inc()
    if success and bytes_written > 0:
        bytes_written_total.inc(bytes_written)


def record_http_attempt(method: str, outcome: str):
    """Registra un intento HTTP (outcome: ok, status, timeout, error)."""
    if not config.enable_metrics:
        return
    http_attempts_total.labels(method=method, outcome=outcome).inc()


def generate_metrics() -> bytes:
    """Devuelve las métricas en formato de exposición de Prometheus."""
    return generate_latest(registry)


def write_metrics(path: str) -> None:
    """Escribe las métricas en un archivo para el textfile collector."""
    write_to_textfile(path, registry)


def get_metrics_summary() -> Dict[str, Any]:
    """
    Resumen legible de las métricas acumuladas en este proceso.

    Returns:
        Dict con contadores por estado
    """
    summary: Dict[str, Any] = {}
    for metric in registry.collect():
        for sample in metric.samples:
            if not sample.name.endswith("_total"):
                continue
            label = ",".join(f"{k}={v}" for k, v in sorted(sample.labels.items()))
            key = f"{sample.name}{{{label}}}" if label else sample.name
            summary[key] = sample.value
    return summary
