"""
Audit and Request Logging Middleware for the Coupon Service
One structured audit line per request using Starlette's BaseHTTPMiddleware.
"""
import json
import socket
import time
from datetime import datetime

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from coupon_service.logging.utils import get_app_logger, init_audit_logger
from coupon_service.logging.config import LoggingConfig
from coupon_service.middlewares.request_context import create_request_id, request_context, clear_request_context

# settings
from coupon_service.config.settings import CouponConfigs
configs = CouponConfigs()


class AuditMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.logger = get_app_logger('coupons.middleware')
        self.exclude_audit_paths = exclude_paths or ['/health', '/docs', '/redoc', '/openapi.json']
        self.hostname = socket.gethostname()
        self.app_name = configs.APP_NAME
        self.version = configs.APP_VERSION

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        clear_request_context()
        request_id = create_request_id()
        start_time = time.time()
        timestamp = datetime.now().isoformat()

        request_context.request_method = request.method
        request_context.request_path = request.url.path

        should_audit = LoggingConfig.AUDIT_LOGGING_ENABLED and not any(
            request.url.path.startswith(p) for p in self.exclude_audit_paths
        )
        body_bytes = await request.body() if should_audit else b""

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = (time.time() - start_time) * 1000
            self.logger.error(
                f"request_exception | method={request.method} path={request.url.path} error={exc.__class__.__name__} duration_ms={duration:.0f}",
                exc_info=True,
            )
            if should_audit:
                audit_data = self._build_audit_data(request, Response(status_code=500), body_bytes, duration, request_id, timestamp)
                audit_data['exception'] = exc.__class__.__name__
                init_audit_logger().info("Audit log (exception)", extra=audit_data)
            raise

        duration = (time.time() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        if should_audit:
            audit_data = self._build_audit_data(request, response, body_bytes, duration, request_id, timestamp)
            init_audit_logger().info("Audit log", extra=audit_data)
        return response

    def _parse_body(self, request: Request, body_bytes: bytes):
        if not body_bytes:
            return {}
        content_type = request.headers.get('content-type', '')
        try:
            if 'application/json' in content_type:
                return json.loads(body_bytes.decode('utf-8'))
            return body_bytes.decode('utf-8')[:1000]
        except (UnicodeDecodeError, json.JSONDecodeError):
            return {}

    def _build_audit_data(
        self,
        request: Request,
        response: Response,
        body_bytes: bytes,
        duration: float,
        request_id: str,
        timestamp: str,
    ) -> dict:
        return {
            'duration': round(duration, 2),
            'hostname': self.hostname,
            'app_name': self.app_name,
            'request': self._parse_body(request, body_bytes),
            'query_params': dict(request.query_params),
            'request_id': request_id,
            'request_method': request.method,
            'request_path': request.url.path,
            'status_code': getattr(response, 'status_code', 0),
            'size_in_bytes': int(response.headers.get('content-length', 0) or 0),
            'timestamp': timestamp,
            'version': self.version,
        }
