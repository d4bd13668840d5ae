from __future__ import annotations  # HTTP client for OpenAI-compatible chat completion routes

import json
import logging
import os
import re
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute

from .errors import LlmGatewayError
from .retry import with_retry


logger = logging.getLogger(__name__)

_ROUTE_LOCKS: Dict[str, threading.Lock] = {}
_ROUTE_LOCKS_GUARD = threading.Lock()


class HttpClient(Protocol):  # Anything with an httpx-style post()
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


T = TypeVar("T", bound=BaseModel)


def _lock_for(cfg: LlmRoute) -> threading.Lock:  # One lock per sequential route
    with _ROUTE_LOCKS_GUARD:
        return _ROUTE_LOCKS.setdefault(cfg.name or f"{cfg.base_url}{cfg.endpoint}", threading.Lock())


def call(
    task: str,
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:  # Send a single user task and validate the reply against ``schema``
    return chat([{"role": "user", "content": task}], schema, cfg=cfg, client=client, options=options, sleep=sleep)


def chat(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run a chat completion on ``cfg`` and parse the reply into ``schema``.

    Transient failures are retried with exponential backoff according to
    the route's retry policy. Request failures surface as ``LlmGatewayError``.
    """

    conversation = _normalize_messages(messages)
    if cfg.enforce_json:
        schema_json = json.dumps(schema.model_json_schema(), indent=2)
        system_prompt = "Reply with a single JSON object matching this schema:\n" + schema_json
        conversation.insert(0, {"role": "system", "content": system_prompt})
    payload: Dict[str, Any] = {"model": cfg.model, "messages": conversation}
    if cfg.temperature is not None:
        payload["temperature"] = cfg.temperature
    if cfg.response_format:
        payload["response_format"] = {"type": cfg.response_format}
    if options:
        payload.update(options)
    headers = _headers(cfg)
    url = f"{cfg.base_url}{cfg.endpoint}"

    def _execute() -> T:
        logger.info(
            "LLM request start route=%s model=%s attempts=%d preview=%s",
            cfg.name,
            cfg.model,
            cfg.max_attempts,
            _preview(conversation[-1]["content"] if conversation else ""),
        )
        parsed = with_retry(
            lambda: _attempt(url, payload, headers, schema, cfg.timeout_s, client),
            operation_name=f"LLM route {cfg.name}",
            max_attempts=cfg.max_attempts,
            base_delay_s=cfg.base_delay_s,
            max_delay_s=cfg.max_delay_s,
            sleep=sleep,
        )
        logger.info("LLM request done route=%s model=%s", cfg.name, cfg.model)
        return parsed

    if cfg.sequential:
        with _lock_for(cfg):
            return _execute()
    return _execute()


def _headers(cfg: LlmRoute) -> Dict[str, str]:  # Build request headers including credentials
    headers = {"Content-Type": "application/json"}
    if cfg.api_key_env:
        api_key = os.getenv(cfg.api_key_env)
        if not api_key:
            raise LlmGatewayError(
                f"API key is not configured. Please set the {cfg.api_key_env} environment variable.",
                kind="unavailable",
                retryable=False,
            )
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return headers


def _attempt(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    schema: Type[T],
    timeout: float,
    client: Optional[HttpClient],
) -> T:  # Single request/validate round trip
    with _send(url, payload, headers, timeout, client) as response:
        status = response.status_code
        if status == 429:
            raise LlmGatewayError("LLM rate limit exceeded", kind="rate_limited", status_code=status, retryable=True)
        if status >= 500:
            raise LlmGatewayError(f"LLM returned status {status}", kind="unavailable", status_code=status, retryable=True)
        if status >= 400:
            raise LlmGatewayError(f"LLM returned status {status}", kind="unavailable", status_code=status)
        try:
            data = response.json()
        except ValueError as exc:
            raise LlmGatewayError("LLM payload was not JSON", kind="malformed_response") from exc
    content = _extract_content(data)
    try:
        return schema.model_validate_json(_strip_code_fences(content))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("LLM output validation failed: %s", exc)
        raise LlmGatewayError(
            f"LLM response does not match expected schema: {exc}",
            kind="malformed_response",
        ) from exc


@contextmanager
def _send(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
) -> Iterator[HttpResponse]:  # POST through the injected client or a short-lived httpx client
    if client is not None:
        yield client.post(url, json=payload, headers=headers, timeout=timeout)
        return
    with httpx.Client(timeout=timeout) as http_client:
        yield http_client.post(url, json=payload, headers=headers)


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> List[Dict[str, str]]:
    normalized = [{"role": str(m.get("role", "")).strip(), "content": str(m.get("content", ""))} for m in messages]
    if any(not message["role"] for message in normalized):
        raise ValueError("Chat message missing role")
    return normalized


def _preview(text: str, limit: int = 120) -> str:  # First non-empty line, truncated for logs
    first = next((line.strip() for line in text.splitlines() if line.strip()), "")
    return first if len(first) <= limit else first[: limit - 3] + "..."


def _extract_content(data: Any) -> str:  # Pull the completion text out of an OpenAI-style payload
    content: Any = None
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
        elif isinstance(data.get("content"), str):
            content = data["content"]
    if not isinstance(content, str):
        raise LlmGatewayError("LLM response missing content", kind="malformed_response")
    if not content.strip():
        raise LlmGatewayError("LLM returned an empty response", kind="unavailable", retryable=True)
    return content


_FENCE = re.compile(r"^```[\w-]*\s*\n(?P<body>.*?)\n?\s*```$", re.DOTALL)


def _strip_code_fences(content: str) -> str:  # Models sometimes wrap JSON in markdown fences
    text = content.strip()
    match = _FENCE.match(text)
    return match.group("body").strip() if match else text
