"""Shared FastAPI dependencies."""

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from ragcrawl.core.config import Settings
from ragcrawl.services.container import ServiceContainer

# API key authentication
API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


async def verify_api_key(
    request: Request, api_key: str | None = Security(API_KEY_HEADER)
) -> str:
    """Verify API key from request header.

    Args:
        request: Incoming request (gives access to app settings)
        api_key: API key from X-API-Key header

    Returns:
        Validated API key

    Raises:
        HTTPException: 401 if API key is missing or invalid
    """
    expected_key = get_settings(request).api_key

    # Allow unauthenticated access if no API key is configured
    if not expected_key:
        return ""

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key
