from typing import Optional
import logging

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

security_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def log_action(action: str, details: object = None) -> None:
    """Log state-changing requests."""
    logger.info("ACTION | %s | %s", action, details)


async def verify_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme)) -> str:
    """Check the bearer token when one is configured."""
    config = getattr(request.app.state, "config", None)
    expected = config.security.token if config is not None else None

    # No token configured: the console is open
    if not expected:
        return "admin"

    if not credentials:
        raise HTTPException(status_code=401, detail="Missing authentication token")

    if credentials.credentials != expected:
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    return "admin"
