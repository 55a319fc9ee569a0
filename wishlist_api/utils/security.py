from flask import current_app, request

from ..errors import AuthorizationError


def is_authorized(origin, host, mode: str, storefront_url, development_host) -> bool:
    if mode == "development":
        return bool(host and development_host and development_host in host)
    return bool(origin and storefront_url and origin.startswith(storefront_url))


def require_store_origin():
    cfg = current_app.config["SHOPIFY"]
    origin = request.headers.get("Origin") or request.headers.get("Referer")
    if not is_authorized(origin, request.host, cfg.mode, cfg.store_url, cfg.development_host):
        raise AuthorizationError("Request not authorized from this store")
