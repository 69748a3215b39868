"""
MCP API routes - the single action endpoint.
"""
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.actions.router import ActionRouter
from editorial_ledger.api.deps import get_action_router, response_headers
from editorial_ledger.core.exceptions import InvalidRequest
from editorial_ledger.database import get_session
from editorial_ledger.schemas.mcp import McpResponse

router = APIRouter(prefix="/mcp", tags=["mcp"])  # mounted under settings.API_PREFIX
health_router = APIRouter(tags=["health"])


@router.post("")
async def handle_action(
    request: Request,
    session: AsyncSession = Depends(get_session),
    action_router: ActionRouter = Depends(get_action_router)
):
    """Execute one MCP action: {"action": ..., "params": {...}}."""
    try:
        body = await request.json()
    except ValueError:
        error = InvalidRequest("Request body must be valid JSON.")
        status_code, payload = error.status_code, McpResponse.fail(error.message)
    else:
        status_code, payload = await action_router.dispatch(body, session)

    return JSONResponse(
        content=jsonable_encoder(payload),
        status_code=status_code,
        headers=response_headers(request)
    )


@router.get("")
async def describe(
    request: Request,
    action_router: ActionRouter = Depends(get_action_router)
):
    """Service description and the registered actions."""
    return JSONResponse(
        content=jsonable_encoder(action_router.describe()),
        headers=response_headers(request)
    )


@router.options("")
async def preflight(request: Request):
    """CORS preflight."""
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=response_headers(request))


@health_router.get("/health")
async def health(
    request: Request,
    action_router: ActionRouter = Depends(get_action_router)
):
    """Alias of GET /api/mcp."""
    return await describe(request, action_router)

