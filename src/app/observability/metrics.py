"""Métricas via structured logging.

Registradas como logs estruturados e agregadas depois pelo backend
de logs (Cloud Logging, BigQuery, etc.).

Uso:
    started = time.perf_counter()
    token = await issuer.issue_token(scopes)
    record_latency("token_issuer", "issue_token", (time.perf_counter() - started) * 1000)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
    *,
    outcome: str = "ok",
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "token_issuer", "deferred_task")
        operation: Nome da operação (ex: "issue_token", "admin.users.get")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (usa o do contexto se None)
        outcome: Resultado resumido (ok, error, delivered, reported)
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
        "outcome": outcome,
    }
    if correlation_id:
        extra["correlation_id"] = correlation_id
    logger.info("metric_latency", extra=extra)
