from artibrain.api.middleware.rate_limit import RateLimitMiddleware
from artibrain.api.middleware.request_id import RequestIdMiddleware

__all__ = ["RateLimitMiddleware", "RequestIdMiddleware"]
