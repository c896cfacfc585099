"""
Logging utilities for the Coupon Service (FastAPI)
"""
import logging

from coupon_service.logging.config import LoggingConfig
from coupon_service.logging.handlers import get_app_handler, get_audit_handler
from coupon_service.logging.filters import RequestContextFilter, BusinessContextFilter


def setup_app_logging(logger_name: str):
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()

    handler = get_app_handler(logger_name.replace('.', '_'))
    if not handler.filters:
        handler.addFilter(RequestContextFilter())
        handler.addFilter(BusinessContextFilter())

    logger.addHandler(handler)
    logger.setLevel(LoggingConfig.level())
    logger.propagate = False
    return logger


def setup_audit_logging(logger_name: str):
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()

    handler = get_audit_handler()
    if not handler.filters:
        handler.addFilter(RequestContextFilter())

    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


essential_app_logger = None

def get_app_logger(name: str | None = None):
    global essential_app_logger
    if name:
        logger = logging.getLogger(name)
        if not logger.handlers:
            setup_app_logging(name)
        return logger
    if essential_app_logger is None:
        essential_app_logger = setup_app_logging('coupons')
    return essential_app_logger


def init_audit_logger():
    logger = logging.getLogger('coupons.audit')
    if logger.handlers:
        return logger
    return setup_audit_logging('coupons.audit')


def initialize_logging():
    is_valid, message = LoggingConfig.is_valid_config()
    logger = get_app_logger()
    if not is_valid:
        logger.warning(f"logging_config_invalid | message={message}")
    logger.info(f"logging_initialized | level={LoggingConfig.LOG_LEVEL} file_enabled={LoggingConfig.LOG_FILE_ENABLED}")
