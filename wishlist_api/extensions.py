from flask import current_app, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")


def api_rate_limit() -> str:
    return current_app.config["SHOPIFY"].api_rate_limit


def outside_api() -> bool:
    return not request.path.startswith("/api/")


# one budget per client IP shared by every /api/ route
api_limit = limiter.shared_limit(
    api_rate_limit,
    scope="api",
    exempt_when=outside_api,
    error_message="Too many requests from this IP, please try again later.",
)
