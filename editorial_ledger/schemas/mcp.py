"""
MCP envelope schemas.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator


class McpRequest(BaseModel):
    """POST body: an action name and a free-form parameter bag."""
    action: str = ""
    params: Dict[str, Any] = {}

    @field_validator("action", mode="before")
    @classmethod
    def _strip_action(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""

    @field_validator("params", mode="before")
    @classmethod
    def _params_mapping(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @classmethod
    def from_body(cls, body: Any) -> "McpRequest":
        """Anything that is not a JSON object is an empty request."""
        if not isinstance(body, dict):
            return cls()
        return cls(action=body.get("action"), params=body.get("params"))

    class Config:
        json_schema_extra = {
            "example": {
                "action": "create_campaign",
                "params": {"project_name": "Europe eSIM Launch", "channels": "email, social"}
            }
        }


class McpResponse(BaseModel):
    """Uniform result envelope."""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any) -> Dict[str, Any]:
        return cls(success=True, data=data).model_dump(exclude_unset=True)

    @classmethod
    def fail(cls, error: str) -> Dict[str, Any]:
        return cls(success=False, error=error).model_dump(exclude_unset=True)


class ServiceDescription(BaseModel):
    """GET response: static service metadata."""
    success: bool = True
    service: str
    version: str
    architecture: str = "orchestration-native"
    mcp_protocol: str = "enabled"
    mcp_protocol_version: str
    core_actions: List[str]
    extended_actions: List[str]
    database: str = "postgresql"
    levels_supported: List[int] = [3, 4, 5]
    timestamp: datetime
