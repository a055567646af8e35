"""Cliente HTTP base para chamadas externas (OAuth, Directory, Discord).

Retry com backoff exponencial apenas para métodos idempotentes; escritas
são tentadas uma única vez. Respostas não-2xx são devolvidas ao chamador,
que decide como mapear status e corpo.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 20.0
    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 8.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Falha de transporte (conexão/timeout) sem dados sensíveis."""

    def __init__(self, message: str, *, method: str = "", is_retryable: bool = False) -> None:
        super().__init__(message)
        self.method = method
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP assíncrono com retry para leituras.

    Args:
        config: Timeouts, retries e headers padrão
        transport: Transport httpx opcional (ex: MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        json: Any = None,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Executa a requisição e retorna a resposta final.

        Raises:
            HttpError: se a conexão falhar após as tentativas permitidas.
        """
        method = method.upper()
        merged_headers = {**self._config.default_headers, **(headers or {})}
        retries = self._config.max_retries if method in IDEMPOTENT_METHODS else 0

        for attempt in range(retries + 1):
            try:
                async with httpx.AsyncClient(
                    transport=self._transport,
                    verify=self._config.verify_ssl,
                    timeout=self._config.timeout_seconds,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        headers=merged_headers,
                        params=params,
                        json=json,
                        data=data,
                    )
            except httpx.TransportError as exc:
                if attempt >= retries:
                    raise HttpError(
                        "http_connection_error",
                        method=method,
                        is_retryable=method in IDEMPOTENT_METHODS,
                    ) from exc
                await self._backoff(attempt, reason=type(exc).__name__)
                continue

            if response.status_code in RETRYABLE_STATUS and attempt < retries:
                await self._backoff(attempt, reason=str(response.status_code))
                continue
            return response

        raise HttpError("http_retry_exhausted", method=method, is_retryable=True)

    async def _backoff(self, attempt: int, *, reason: str) -> None:
        await _backoff_sleep(
            attempt,
            self._config.backoff_base_seconds,
            self._config.backoff_max_seconds,
            reason=reason,
        )


async def _backoff_sleep(attempt: int, base: float, max_seconds: float, *, reason: str) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff, "reason": reason})
    await asyncio.sleep(backoff)
