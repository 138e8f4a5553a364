import secrets
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from partflow.core import config
from partflow.utils.logger import get_logger

logger = get_logger(__name__)

admin_key_header = APIKeyHeader(name="X-Admin-Key", auto_error=False)


async def require_admin_key(api_key: Optional[str] = Security(admin_key_header)) -> None:
    if not config.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrative operations are disabled",
        )

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Admin-Key header",
        )

    if not secrets.compare_digest(api_key, config.ADMIN_API_KEY):
        logger.warning("Rejected administrative request: wrong admin key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied",
        )
