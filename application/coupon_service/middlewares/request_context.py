"""
Request context utilities for FastAPI using contextvars
"""
from contextvars import ContextVar
import uuid


class RequestContext:
    def __init__(self):
        self.request_id: str | None = None
        self.module_name: str | None = None
        self.request_method: str | None = None
        self.request_path: str | None = None
        self.coupon_id: int | None = None
        self.cart_size: int | None = None


_request_context_var: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def _current() -> RequestContext:
    ctx = _request_context_var.get()
    if ctx is None:
        ctx = RequestContext()
        _request_context_var.set(ctx)
    return ctx


class _RequestContextProxy:
    def __getattr__(self, name):
        return getattr(_current(), name)

    def __setattr__(self, name, value):
        # ensure we set on current context instance
        setattr(_current(), name, value)


request_context = _RequestContextProxy()


def set_request_context(ctx: RequestContext):
    _request_context_var.set(ctx)


def clear_request_context():
    _request_context_var.set(RequestContext())


def create_request_id() -> str:
    rid = str(uuid.uuid4())
    request_context.request_id = rid
    return rid
