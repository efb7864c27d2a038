"""Admin token check."""

from fastapi import Header, HTTPException

from newsdesk.config import get_settings


async def require_admin_token(
    x_admin_token: str | None = Header(None, alias="X-Admin-Token"),
) -> None:
    """Reject requests without the configured admin token."""
    admin_token = get_settings().admin_token
    if not admin_token:
        raise HTTPException(status_code=500, detail="ADMIN_TOKEN not configured")
    if x_admin_token != admin_token:
        raise HTTPException(status_code=401, detail="Unauthorized")
