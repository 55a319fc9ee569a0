import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

GRAPHQL_API_VERSION = os.getenv("GRAPHQL_API_VERSION", "2025-10")
REST_API_VERSION = os.getenv("REST_API_VERSION", "2023-10")
PORT = int(os.getenv("PORT", "3000"))
# per client IP, across every /api/ route
API_RATE_LIMIT = os.getenv("API_RATE_LIMIT", "100 per 15 minutes")

# metafield that holds the whole wishlist
WISHLIST_NAMESPACE = "custom"
WISHLIST_KEY = "wishlist_products"


def _env_mode() -> str:
    return (os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or os.getenv("NODE_ENV") or "production").lower()


@dataclass
class ShopifyConfig:
    store_url: Optional[str] = None
    access_token: Optional[str] = None
    shop_domain: Optional[str] = None
    development_host: Optional[str] = None
    mode: str = "production"
    graphql_version: str = GRAPHQL_API_VERSION
    rest_version: str = REST_API_VERSION
    timeout: float = 30
    api_rate_limit: str = API_RATE_LIMIT

    @property
    def is_development(self) -> bool:
        return self.mode == "development"

    @classmethod
    def from_env(cls) -> "ShopifyConfig":
        return cls(
            store_url=(os.getenv("SHOPIFY_STORE_URL") or "").rstrip("/") or None,
            access_token=os.getenv("SHOPIFY_ACCESS_TOKEN"),
            shop_domain=os.getenv("SHOPIFY_SHOP_DOMAIN"),
            development_host=os.getenv("DEVELOPMENT_URL"),
            mode=_env_mode(),
            graphql_version=GRAPHQL_API_VERSION,
            rest_version=REST_API_VERSION,
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            api_rate_limit=API_RATE_LIMIT,
        )
