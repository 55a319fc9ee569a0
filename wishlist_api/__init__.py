import sys
import logging
from datetime import datetime, timezone

from flask import Flask, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, NotFound

from .config import ShopifyConfig
from .errors import WishlistError
from .extensions import limiter
from .utils.logger import LOG_LEVEL

VERSION = "1.0.0"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def create_app(config: ShopifyConfig = None, client=None):
    config = config or ShopifyConfig.from_env()
    app = Flask(__name__)
    app.config["SHOPIFY"] = config

    # =========================================================
    # Logging: reuse gunicorn's handlers when served by it
    # =========================================================
    gunicorn_error = logging.getLogger("gunicorn.error")
    app.logger.handlers = list(gunicorn_error.handlers)
    app.logger.setLevel(LOG_LEVEL)

    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(LOG_LEVEL)
    sh.setFormatter(logging.Formatter("[%(asctime)s][%(levelname)s] %(message)s", "%H:%M:%S"))
    app.logger.addHandler(sh)

    CORS(app, origins=config.store_url or "*", supports_credentials=True)
    limiter.init_app(app)

    @app.after_request
    def security_headers(resp):
        for k, v in SECURITY_HEADERS.items():
            resp.headers.setdefault(k, v)
        return resp

    # =========================================================
    # Services
    # =========================================================
    from .clients.shopify import ShopifyClient
    from .services.wishlist import WishlistService

    app.extensions["wishlist"] = WishlistService(client or ShopifyClient(config))

    # =========================================================
    # Blueprints
    # =========================================================
    from .routes.wishlist import bp as wishlist_bp

    app.register_blueprint(wishlist_bp, url_prefix="/wishlist")
    app.register_blueprint(wishlist_bp, url_prefix="/api/wishlist", name="api_wishlist")

    @app.get("/health")
    def health():
        app.logger.info("Health check endpoint called")
        return {
            "status": "OK",
            "message": "Wishlist API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }, 200

    @app.get("/")
    def index():
        return {
            "message": "Shopify Customer Wishlist API",
            "version": VERSION,
            "endpoints": {
                "POST /wishlist/add": "Add product to wishlist",
                "GET /wishlist": "Get customer wishlist",
                "DELETE /wishlist/remove": "Remove product from wishlist",
                "GET /health": "Liveness check",
            },
        }, 200

    # =========================================================
    # Error handlers
    # =========================================================
    @app.errorhandler(WishlistError)
    def wishlist_error(e: WishlistError):
        return e.to_dict(), e.status

    @app.errorhandler(NotFound)
    def not_found(e):
        return {"error": "Route not found", "message": f"Cannot {request.method} {request.path}"}, 404

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return {"error": e.name, "message": e.description}, e.code
        app.logger.exception(f"Error: {e}")
        message = str(e) if config.is_development else "Internal server error"
        return {"error": "Something went wrong!", "message": message}, 500

    return app
