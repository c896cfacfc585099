import json
import logging

from coupon_service.logging.filters import BusinessContextFilter, RequestContextFilter
from coupon_service.logging.formatters import AppLogsJSONFormatter
from coupon_service.middlewares.request_context import RequestContext, clear_request_context, set_request_context


def make_record():
    return logging.LogRecord("coupons.test", logging.INFO, __file__, 1, "coupon_applied | coupon_id=7", None, None)


def test_app_log_line_carries_request_context():
    ctx = RequestContext()
    ctx.request_id = "req-1"
    ctx.module_name = "middleware_handlers"
    ctx.request_method = "POST"
    ctx.request_path = "/coupons/apply-coupon/7"
    ctx.coupon_id = 7
    ctx.cart_size = 2
    set_request_context(ctx)
    try:
        record = make_record()
        assert RequestContextFilter().filter(record)
        assert BusinessContextFilter().filter(record)

        entry = json.loads(AppLogsJSONFormatter().format(record))
    finally:
        clear_request_context()

    assert entry["message"] == "coupon_applied | coupon_id=7"
    assert entry["request_id"] == "req-1"
    assert entry["module_name"] == "middleware_handlers"
    assert entry["request_path"] == "/coupons/apply-coupon/7"
    assert entry["coupon_id"] == 7
    assert entry["cart_size"] == 2


def test_missing_module_name_is_blank():
    clear_request_context()
    record = make_record()
    RequestContextFilter().filter(record)
    assert record.module_name == ""
    assert record.request_id
