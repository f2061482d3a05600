"""
FastAPI dependency functions for authentication.

The gate itself is `BasicAuthMiddleware`; these dependencies expose what it
established to route handlers.
"""

from fastapi import Request


def get_current_user(request: Request) -> str:
    """
    Dependency that returns the username the gate authenticated.

    Returns:
        str: The authenticated username, or "" if the gate did not run.
    """
    return getattr(request.state, "username", "")
