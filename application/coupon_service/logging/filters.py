"""
Basic Logging Filters for the Coupon Service
"""
import logging
import uuid
from coupon_service.middlewares.request_context import request_context


class RequestContextFilter(logging.Filter):
    def filter(self, record):
        record.request_id = getattr(request_context, 'request_id', None) or str(uuid.uuid4())
        # Inject HTTP method and path if present in context
        record.request_method = getattr(request_context, 'request_method', '') or ''
        record.request_path = getattr(request_context, 'request_path', '') or ''
        record.module_name = getattr(request_context, 'module_name', '') or ''
        return True


class BusinessContextFilter(logging.Filter):
    def filter(self, record):
        record.coupon_id = getattr(request_context, 'coupon_id', '') or ''
        record.cart_size = getattr(request_context, 'cart_size', 0) or 0
        return True
