import os
from dotenv import load_dotenv
load_dotenv()

class CouponConfigs:
    def __init__(self):

        # Database settings
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./coupons.db")
        self.DB_AUTO_CREATE = os.getenv("DB_AUTO_CREATE", "false").lower() == "true"
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
        self.DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))

        # Environment settings
        self.APPLICATION_ENVIRONMENT = os.getenv("APPLICATION_ENVIRONMENT", "UAT")
        self.APP_NAME = os.getenv('APP_NAME', 'coupon-service')
        self.APP_VERSION = os.getenv('APP_VERSION', '1.0.0')
        self.DEBUG = os.getenv("DEBUG", "true").lower() == "true"
        self.ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "")

        # Sentry settings
        self.SENTRY_ENABLED = os.getenv("SENTRY_ENABLED", "false").lower() == "true"
        self.SENTRY_DSN = os.getenv("SENTRY_DSN", "")
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.SENTRY_RELEASE = os.getenv("SENTRY_RELEASE", "coupon-service@1.0.0")
        self.SENTRY_TRACES_SAMPLE_RATE = os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")
        self.SENTRY_PROFILES_SAMPLE_RATE = os.getenv("SENTRY_PROFILES_SAMPLE_RATE", "0.1")

        # Logging settings
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FILE_ENABLED = os.getenv("LOG_FILE_ENABLED", "false").lower() == "true"
        self.LOG_DIR = os.getenv("LOG_DIR", "logs")
        self.AUDIT_LOGGING_ENABLED = os.getenv("AUDIT_LOGGING_ENABLED", "false").lower() == "true"
