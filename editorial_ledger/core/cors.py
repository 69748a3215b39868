"""
CORS headers for the MCP endpoint.
With no allow-list every origin is accepted; otherwise the request origin is
echoed back when listed and "null" is sent when it is not.
"""
from typing import Dict, Optional, Sequence

DEFAULT_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def get_cors_headers(origin: Optional[str], allowed_origins: Sequence[str]) -> Dict[str, str]:
    if not allowed_origins:
        return dict(DEFAULT_CORS_HEADERS)

    if origin and origin in allowed_origins:
        return {**DEFAULT_CORS_HEADERS, "Access-Control-Allow-Origin": origin}

    return {**DEFAULT_CORS_HEADERS, "Access-Control-Allow-Origin": "null"}
