"""
API dependencies - shared across all routes.
"""
from typing import Dict

from fastapi import Request

from editorial_ledger.actions.router import ActionRouter
from editorial_ledger.config import Settings
from editorial_ledger.core.cors import get_cors_headers


def get_action_router(request: Request) -> ActionRouter:
    """The router built for this app at startup."""
    return request.app.state.action_router


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def response_headers(request: Request) -> Dict[str, str]:
    """CORS headers for the request's origin plus the ledger version headers."""
    settings = get_settings(request)
    headers = get_cors_headers(request.headers.get("origin"), settings.allowed_origins)
    headers["X-Editorial-OS-Version"] = settings.SERVICE_VERSION
    headers["X-MCP-Protocol"] = "enabled"
    return headers
