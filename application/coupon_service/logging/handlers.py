"""
Logging Handlers for the Coupon Service
Stdout stream handlers with an optional local-file sink.
"""
import logging
import os
import sys

from coupon_service.logging.config import LoggingConfig
from coupon_service.logging.formatters import AppLogsJSONFormatter, AuditLogsJSONFormatter

_handlers = {}


def get_local_file_handler(name: str = 'app'):
    os.makedirs(LoggingConfig.LOG_DIR, exist_ok=True)
    handler = logging.FileHandler(os.path.join(LoggingConfig.LOG_DIR, f'{name}.log'))
    formatter = AuditLogsJSONFormatter() if name.startswith('audit') else AppLogsJSONFormatter()
    handler.setFormatter(formatter)
    return handler


def get_stream_handler(name: str = 'app'):
    if name not in _handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = AuditLogsJSONFormatter() if name.startswith('audit') else AppLogsJSONFormatter()
        handler.setFormatter(formatter)
        _handlers[name] = handler
    return _handlers[name]


def get_app_handler(name: str = 'app'):
    if LoggingConfig.LOG_FILE_ENABLED:
        return get_local_file_handler(name)
    return get_stream_handler('app')


def get_audit_handler():
    if LoggingConfig.LOG_FILE_ENABLED:
        return get_local_file_handler('audit_logs')
    return get_stream_handler('audit')
