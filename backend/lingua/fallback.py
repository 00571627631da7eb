"""
Model fallback orchestration.

Every task caller hands ``call_with_retry`` an operation parameterised by a
model id and a client. The operation is tried against the student's preferred
model and then each model of the fallback order, one at a time, until one
attempt succeeds. Failed attempts are kept as ``Attempt`` values instead of
being re-raised, so the loop itself never relies on exceptions for flow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, TypeVar

from .errors import ExhaustedFallbackError, MissingCredentialError
from .gemini_client import GeminiClient
from .preferences import FALLBACK_ORDER, build_candidate_chain, resolve_preferred_model


logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[str, Any], Awaitable[T]]
ClientFactory = Callable[[str], Any]


@dataclass
class Attempt(Generic[T]):
	"""Outcome of running an operation against one model."""
	model: str
	value: Optional[T] = None
	error: Optional[BaseException] = None

	@property
	def ok(self) -> bool:
		return self.error is None


async def _run_attempt(label: str, model: str, api_key: str, operation: Operation, client_factory: ClientFactory) -> Attempt:
	logger.info("[%s] Attempting with model: %s", label, model)
	client = None
	try:
		client = client_factory(api_key)
		value = await operation(model, client)
	except Exception as err:
		logger.warning("[%s] Failed with model %s: %s", label, model, err)
		return Attempt(model=model, error=err)
	finally:
		await _close_client(label, model, client)
	return Attempt(model=model, value=value)


async def _close_client(label: str, model: str, client: Any) -> None:
	# A failed close never replaces the attempt's outcome
	if client is None or not hasattr(client, "aclose"):
		return
	try:
		await client.aclose()
	except Exception as err:
		logger.warning("[%s] Closing client for model %s failed: %s", label, model, err)


async def call_with_retry(
	label: str,
	operation: Operation,
	*,
	api_key: str,
	preferred_model: Optional[str],
	fallback_order: Iterable[str] = FALLBACK_ORDER,
	client_factory: ClientFactory = GeminiClient,
) -> T:
	"""Run ``operation`` against each candidate model until one succeeds.

	Args:
		label: Operation name used in logs and in the aggregated error
		operation: Coroutine function taking ``(model, client)``
		api_key: Resolved API key; empty means no credential is configured
		preferred_model: The student's stored choice; unsupported values fall back to the default
		fallback_order: Models tried after the preferred one
		client_factory: Builds a fresh client for each attempt from the key

	Returns:
		The value of the first successful attempt

	Raises:
		MissingCredentialError: If ``api_key`` is empty; no attempt is made
		ExhaustedFallbackError: If every candidate model failed
	"""
	if not api_key:
		raise MissingCredentialError()

	chain = build_candidate_chain(resolve_preferred_model(preferred_model), fallback_order)
	failures: List[Attempt] = []
	for model in chain:
		attempt = await _run_attempt(label, model, api_key, operation, client_factory)
		if attempt.ok:
			return attempt.value  # type: ignore[return-value]
		failures.append(attempt)

	last_error = failures[-1].error if failures else None
	logger.error("[%s] All %d candidate models failed", label, len(failures))
	raise ExhaustedFallbackError(label, last_error, failures)
