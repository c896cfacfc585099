from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any
from coupon_service.config.sentry import capture_exception, add_breadcrumb
from coupon_service.config.settings import CouponConfigs
from coupon_service.logging.utils import get_app_logger
from coupon_service.middlewares.request_context import request_context

logger = get_app_logger("coupons.middlewares.handlers")

configs = CouponConfigs()


def _error_messages(exc: RequestValidationError) -> list:
    # Single readable line per error: "field_path: error_message"
    error_messages = []
    for err in exc.errors():
        field_path = " -> ".join(str(loc) for loc in err.get("loc", []))
        error_messages.append(f"{field_path}: {err.get('msg', 'Invalid input')}")
    return error_messages


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with production-safe messages."""
    request_context.module_name = 'middleware_handlers'

    add_breadcrumb(
        message=f"Validation error on {request.method} {request.url}",
        category="validation",
        level="error",
        data={"errors": _error_messages(exc)}
    )

    if not configs.DEBUG:
        payload = {"message": "Invalid request data"}
    else:
        error_messages = _error_messages(exc)
        if len(error_messages) == 1:
            payload = {"message": error_messages[0]}
        else:
            payload = {"message": "Validation errors", "errors": error_messages}

    logger.warning(f"validation_error | method={request.method} url={str(request.url)} errors={payload}")
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=payload)


async def _general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions with production-safe messages."""
    request_context.module_name = 'middleware_handlers'
    logger.error(
        f"unhandled_exception | method={request.method} url={str(request.url)} exception_type={type(exc).__name__} exception_message={str(exc)}",
        exc_info=True,
    )

    add_breadcrumb(
        message=f"Unhandled exception on {request.method} {request.url}",
        category="exception",
        level="error",
        data={"exception_type": type(exc).__name__, "exception_message": str(exc)}
    )
    capture_exception(exc)

    if not configs.DEBUG:
        payload = {"message": "Something went wrong"}
    else:
        payload = {"message": f"Internal server error: {str(exc)}"}

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def _http_exception_handler(request: Request, exc: Any):
    """Handle HTTP exceptions; coupon rejections keep their error code in every environment."""
    request_context.module_name = 'middleware_handlers'
    status_code = getattr(exc, 'status_code', status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = getattr(exc, 'detail', str(exc))

    # Log 5xx as errors and 4xx as warnings
    if status_code >= 500:
        logger.error(f"http_exception | method={request.method} url={str(request.url)} status_code={status_code} detail={detail}")
        add_breadcrumb(
            message=f"HTTP {status_code} error on {request.method} {request.url}",
            category="http",
            level="error",
            data={"status_code": status_code, "detail": detail}
        )
        capture_exception(exc)
    else:
        logger.warning(f"http_exception | method={request.method} url={str(request.url)} status_code={status_code} detail={detail}")

    if isinstance(detail, dict) and "error_code" in detail and (configs.DEBUG or status_code < 500):
        payload = dict(detail)
    elif not configs.DEBUG:
        if status_code == 404:
            message = "Resource not found"
        elif 400 <= status_code < 500:
            message = "Invalid request"
        else:
            message = "Something went wrong"
        payload = {"message": message}
    else:
        payload = {"message": detail}

    return JSONResponse(status_code=status_code, content=payload, headers=getattr(exc, 'headers', None))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the given FastAPI instance."""
    from starlette.exceptions import HTTPException as StarletteHTTPException

    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _general_exception_handler)
