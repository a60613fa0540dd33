"""
Standardized API response envelopes
"""
from typing import Any, Optional, Dict
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    message: str
    details: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "Article not found",
            }
        }


def success_response(message: Optional[str] = None, **payload: Any) -> Dict[str, Any]:
    """Build a `{success: true, ...payload}` envelope"""
    response: Dict[str, Any] = {"success": True}
    if message is not None:
        response["message"] = message
    response.update(payload)
    return response


def error_response(message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a `{success: false, message}` envelope"""
    response: Dict[str, Any] = {"success": False, "message": message}
    if details:
        response["details"] = details
    return response
