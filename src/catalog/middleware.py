"""
Middleware for request context and logging
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

SENSITIVE_KEYS = {
    "password",
    "token",
    "secret",
    "auth",
    "authorization",
    "jwt",
    "session",
    "cookie",
    "credentials",
}

_OPERATION_RE = re.compile(r"\b(query|mutation)\s+(\w+)")
_FIELD_RE = re.compile(r"\{\s*(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Redact parameters whose names look like credentials."""
    return {
        key: "[REDACTED]" if any(s in key.lower() for s in SENSITIVE_KEYS) else value
        for key, value in params.items()
    }


def graphql_operation_from_payload(payload: dict[str, Any]) -> str | None:
    """Best-effort operation label for a GraphQL payload.

    Uses ``operationName`` when present, otherwise the named operation in the
    document, otherwise its first root field (``getAllPackages``, ``login``...).
    """
    op = payload.get("operationName")
    if isinstance(op, str) and op:
        return op

    document = payload.get("query")
    if not isinstance(document, str) or not document:
        return None
    if "__schema" in document:
        return "__introspection"

    kind = "mutation:" if document.lstrip().startswith("mutation") else ""
    if match := _OPERATION_RE.search(document):
        return f"{kind}{match.group(2)}"
    if match := _FIELD_RE.search(document):
        return f"{kind}{match.group(1)}"
    return "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != "/graphql":
        return None

    if request.method == "GET":
        return graphql_operation_from_payload(dict(request.query_params))

    if request.method == "POST":
        try:
            body = await request.body()
            if not body:
                return None
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(payload, dict):
            return None
        return graphql_operation_from_payload(payload)

    return None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID and log the start and end of every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        set_request_context()

        try:
            query_params = None
            if request.query_params:
                query_params = sanitize_query_params(dict(request.query_params))
                # Never log raw GraphQL documents or variables
                if request.url.path == "/graphql":
                    for key in ("query", "variables", "extensions"):
                        if key in query_params:
                            query_params[key] = "[REDACTED]"

            graphql_operation = await extract_graphql_operation_name(request)

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=query_params,
                graphql_operation=graphql_operation,
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
                graphql_operation=graphql_operation,
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
