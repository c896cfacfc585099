import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# Logger
from coupon_service.logging.utils import get_app_logger
logger = get_app_logger("sentry")

# Settings
from coupon_service.config.settings import CouponConfigs
configs = CouponConfigs()


def init_sentry():
    """Initialize Sentry SDK with flag-based configuration"""
    if not configs.SENTRY_ENABLED:
        logger.info("Sentry monitoring is disabled")
        return

    if not configs.SENTRY_DSN:
        logger.warning("SENTRY_ENABLED is true but SENTRY_DSN is not configured")
        return

    sentry_sdk.init(
        dsn=configs.SENTRY_DSN,
        environment=configs.ENVIRONMENT,
        release=configs.SENTRY_RELEASE,
        traces_sample_rate=float(configs.SENTRY_TRACES_SAMPLE_RATE),
        profiles_sample_rate=float(configs.SENTRY_PROFILES_SAMPLE_RATE),
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=logging.INFO,        # Capture info and above as breadcrumbs
                event_level=logging.ERROR  # Send errors as events
            ),
        ],
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        before_send=before_send_filter,
    )

    logger.info(f"Sentry initialized successfully for environment: {configs.ENVIRONMENT}")


def before_send_filter(event, hint):
    """Filter sensitive headers before sending to Sentry"""
    if 'request' in event and 'headers' in event['request']:
        sensitive_headers = ['authorization', 'cookie', 'x-api-key', 'x-auth-token']
        headers = event['request']['headers']
        for header in sensitive_headers:
            if header in headers:
                headers[header] = '[Filtered]'
    return event


def capture_exception(exception, **kwargs):
    """Capture exceptions only if Sentry is enabled"""
    if configs.SENTRY_ENABLED:
        sentry_sdk.capture_exception(exception, **kwargs)


def add_breadcrumb(message, category="custom", level="info", data=None):
    """Add breadcrumbs only if Sentry is enabled"""
    if configs.SENTRY_ENABLED:
        sentry_sdk.add_breadcrumb(
            message=message,
            category=category,
            level=level,
            data=data or {}
        )
