"""
Logging configuration for the Coupon Service (FastAPI)
Stdout-first with an optional local file sink.
"""
import logging

# Settings
from coupon_service.config.settings import CouponConfigs
configs = CouponConfigs()

class LoggingConfig:
    """Logging configuration resolved from environment settings"""

    LOG_LEVEL = configs.LOG_LEVEL
    LOG_FILE_ENABLED = configs.LOG_FILE_ENABLED
    LOG_DIR = configs.LOG_DIR
    AUDIT_LOGGING_ENABLED = configs.AUDIT_LOGGING_ENABLED

    @classmethod
    def level(cls) -> int:
        value = logging.getLevelName(cls.LOG_LEVEL)
        return value if isinstance(value, int) else logging.INFO

    @classmethod
    def is_valid_config(cls):
        """Validate configuration - only check the log directory when file logging is on"""
        if cls.LOG_FILE_ENABLED and not cls.LOG_DIR:
            return False, "LOG_DIR must be set when LOG_FILE_ENABLED is true"
        if not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            return False, f"Unknown LOG_LEVEL {cls.LOG_LEVEL}, falling back to INFO"
        return True, "Configuration is valid"
