import logging
import time

from fastapi import Request

logger = logging.getLogger("access")

PROCESS_TIME_HEADER = "X-Process-Time-Ms"


async def request_logging_middleware(request: Request, call_next):
    """One access line per request; server errors are logged at WARNING."""
    started = time.perf_counter()

    response = await call_next(request)

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    response.headers[PROCESS_TIME_HEADER] = str(elapsed_ms)

    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "",
        extra={
            "client_addr": request.client.host if request.client else "-",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": elapsed_ms,
        },
    )
    return response
