"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Why one Lambda?
- The dedup set and popup marks live in process memory, so every route must
  share the same warm environment.
- Simpler to deploy while still keeping code organized by delegating to modules.
"""

from typing import Callable, Dict, Tuple
import json

from . import health_check, just_qualified, vip_info, webhook


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def root_handler(event, context):
    """Plain banner for GET /."""
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "text/plain"},
        "body": "VIP Wholesale Discount Server",
    }


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event contains the HTTP method and path; we route it to the correct
    handler while keeping shared setup (logging, error handling) centralized.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path}"

    if route_key in ("GET /", "GET "):
        return root_handler(event, context)

    # Map route keys to handler callables. Using startswith for path params.
    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("GET /api/vip-info", vip_info.lambda_handler),
        ("GET /api/just-qualified/", just_qualified.lambda_handler),
        ("POST /webhook", webhook.lambda_handler),
    )

    for prefix, handler in route_table:
        if route_key.startswith(prefix):
            return handler(event, context)

    return _response(404, {"message": "Route not found", "route": route_key})
