from wishlist_api import create_app
from wishlist_api.config import PORT

app = create_app()

if __name__ == "__main__":
    cfg = app.config["SHOPIFY"]
    app.logger.info(f"Wishlist API server running on port {PORT}")
    app.logger.info(f"Environment: {cfg.mode}")
    app.logger.info(f"Shopify Store: {cfg.store_url or 'Not configured'}")
    app.run(host="0.0.0.0", port=PORT)
