"""
Standardized API error bodies.

Every error returned by the HTTP layer uses the same shape so clients can
handle failures uniformly.
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create a standardized error response body.

    Args:
        message: Error message
        code: Optional error code
        details: Optional additional error details

    Returns:
        Dict with standardized error response format
    """
    error = {"message": message}

    if code:
        error["code"] = code

    if details:
        error["details"] = details

    return {
        "success": False,
        "error": error
    }


def error_json_response(
    message: str,
    status_code: int,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Wrap an error body into a JSONResponse."""
    return JSONResponse(
        content=error_response(message, code, details),
        status_code=status_code
    )
