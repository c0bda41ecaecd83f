"""HTTP executor handler.

Builds the request from the document's global HTTP options and the
executor record, interpolates it against the run state, sends it with
aiohttp and parses the response body as JSON.
"""

from __future__ import annotations

import json
from typing import Any

import aiohttp

from graphrun.dsl.errors import HttpExecutorError
from graphrun.dsl.executor.context import RunContext
from graphrun.dsl.serialization.schema import HttpExecutorRecord
from graphrun.logging import get_logger

logger = get_logger(__name__)

CONTENT_TYPE = "Content-Type"
JSON_CONTENT_TYPE = "application/json"


def build_headers(
    global_headers: dict[str, str],
    executor_headers: dict[str, str],
    has_body: bool,
) -> dict[str, str]:
    """Merge global and executor headers (executor wins).

    Without a body any Content-Type header is dropped. With a body and no
    Content-Type, ``application/json`` is added.

    Examples:
        >>> build_headers({"Content-Type": "application/json"}, {}, False)
        {}
        >>> build_headers({"A": "1"}, {"A": "2"}, True)
        {'A': '2', 'Content-Type': 'application/json'}
    """
    headers = {**global_headers, **executor_headers}
    has_content_type = any(key.lower() == "content-type" for key in headers)
    if not has_body:
        return {k: v for k, v in headers.items() if k.lower() != "content-type"}
    if not has_content_type:
        headers[CONTENT_TYPE] = JSON_CONTENT_TYPE
    return headers


def parse_json_body(text: str) -> Any:
    """Decode a response body, treating an empty body as invalid JSON.

    Raises:
        ValueError: If the body is empty or not JSON.
    """
    if not text.strip():
        raise ValueError("empty body")
    return json.loads(text)


async def execute_http(
    executor: HttpExecutorRecord,
    context: RunContext,
    label: str,
) -> Any:
    """Send the request described by an ``http`` executor.

    Args:
        executor: HttpExecutorRecord with method, endpoint and payload.
        context: Run context; ``state`` receives the response under
            ``executor.mutate`` when set.
        label: Node or hook name, for logging.

    Returns:
        The parsed JSON response.

    Raises:
        HttpExecutorError: On transport errors, timeouts, or a response body
            that is not JSON. Non-2xx responses are logged, not raised.
    """
    http_options = context.options.http
    interpolator = context.interpolator
    state = context.state

    url = interpolator.interpolate_string(http_options.base_url + executor.endpoint, state)
    body = None
    if executor.body is not None:
        body = interpolator.interpolate_value(executor.body, state)
    headers = {
        key: interpolator.interpolate_string(value, state)
        for key, value in build_headers(
            http_options.headers, executor.headers, body is not None
        ).items()
    }
    method = executor.method
    data = None
    if body is not None:
        try:
            data = json.dumps(body)
        except (TypeError, ValueError) as e:
            raise HttpExecutorError(
                f"Request body is not JSON serializable: {e}", method, url
            ) from e

    logger.log(context.trace_level, f"HTTP {method} {url}", node=label)
    if body is not None:
        logger.log(context.trace_level, f"Body: {data}", node=label)

    timeout_seconds = context.settings.http_timeout_seconds
    try:
        timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        async with (
            aiohttp.ClientSession(timeout=timeout) as session,
            session.request(method, url, headers=headers, data=data) as resp,
        ):
            status = resp.status
            if not 200 <= status < 300:
                logger.warning(
                    f"HTTP {method} {url} returned status {status}",
                    node=label,
                    status=status,
                )
            try:
                payload = parse_json_body(await resp.text())
            except ValueError as e:
                raise HttpExecutorError(
                    f"Response is not valid JSON: {e}", method, url, status
                ) from e
    except TimeoutError:
        raise HttpExecutorError(
            f"Request timed out after {timeout_seconds:g}s", method, url
        ) from None
    except aiohttp.ClientError as e:
        raise HttpExecutorError(f"Client error: {e}", method, url) from e

    logger.log(context.trace_level, f"Response: {json.dumps(payload)}", node=label)

    if executor.mutate:
        state[executor.mutate] = payload

    return payload
