"""Política de retry como máquina de estados pura.

Estados: Attempting(n) -> Waiting(delay) -> Attempting(n+1) ... até
Succeeded ou Failed. `next_state` depende só da política, do estado atual
e da observação da tentativa, então é testável sem rede e sem relógio.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Union


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Backoff exponencial limitado.

    Attributes:
        max_attempts: Total de tentativas HTTP (primeira incluída)
        base_delay_seconds: Espera após a primeira falha
        max_delay_seconds: Teto da espera calculada
    """

    max_attempts: int = 4
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0

    def backoff_delay(self, failed_attempt: int) -> float:
        """Espera após a tentativa `failed_attempt` (1-based) falhar."""
        return min(self.base_delay_seconds * (2 ** (failed_attempt - 1)), self.max_delay_seconds)


@dataclass(frozen=True, slots=True)
class Observation:
    """O que uma tentativa produziu.

    status_code None significa que não houve resposta (rede ou timeout).
    """

    status_code: int | None = None
    retry_after_seconds: float | None = None
    timed_out: bool = False

    @property
    def is_transient(self) -> bool:
        status = self.status_code
        return status is None or status == 429 or status >= 500


class FailureReason(str, Enum):
    TERMINAL = "terminal"
    UNAUTHORIZED = "unauthorized"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class Attempting:
    attempt: int
    auth_retried: bool = False


@dataclass(frozen=True, slots=True)
class Waiting:
    next_attempt: int
    delay_seconds: float
    refresh_token: bool = False
    auth_retried: bool = False


@dataclass(frozen=True, slots=True)
class Succeeded:
    attempt: int


@dataclass(frozen=True, slots=True)
class Failed:
    attempt: int
    reason: FailureReason


RetryState = Union[Attempting, Waiting, Succeeded, Failed]


def next_state(policy: RetryPolicy, state: Attempting, observation: Observation) -> RetryState:
    """Transição a partir de uma tentativa concluída.

    - 2xx: Succeeded
    - 401: uma única renovação forçada de token e nova tentativa imediata;
      o segundo 401 é Failed(UNAUTHORIZED)
    - rede/timeout, 429, 5xx: Waiting com Retry-After ou backoff, até
      max_attempts; depois Failed(EXHAUSTED)
    - demais status: Failed(TERMINAL)
    """
    n = state.attempt
    status = observation.status_code

    if status is not None and 200 <= status < 300:
        return Succeeded(attempt=n)

    if status == 401:
        if state.auth_retried:
            return Failed(attempt=n, reason=FailureReason.UNAUTHORIZED)
        return Waiting(next_attempt=n + 1, delay_seconds=0.0, refresh_token=True, auth_retried=True)

    if not observation.is_transient:
        return Failed(attempt=n, reason=FailureReason.TERMINAL)

    # A nova tentativa após 401 não consome o orçamento
    budget_used = n - 1 if state.auth_retried else n
    if budget_used >= policy.max_attempts:
        return Failed(attempt=n, reason=FailureReason.EXHAUSTED)

    if observation.retry_after_seconds is not None:
        delay = observation.retry_after_seconds
    else:
        delay = policy.backoff_delay(budget_used)
    return Waiting(next_attempt=n + 1, delay_seconds=delay, auth_retried=state.auth_retried)


def resume(state: Waiting) -> Attempting:
    """Transição Waiting -> Attempting após a espera."""
    return Attempting(attempt=state.next_attempt, auth_retried=state.auth_retried)


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Interpreta o header Retry-After (delta-seconds ou HTTP-date).

    Returns:
        Segundos de espera (>= 0) ou None se ausente/ilegível
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isascii() and value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    reference = now or datetime.now(timezone.utc)
    return max(0.0, (when - reference).total_seconds())
