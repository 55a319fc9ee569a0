import json
from typing import Optional

import requests

from ..config import ShopifyConfig
from ..errors import RemoteError
from ..utils.logger import error

CUSTOMER_GID_PREFIX = "gid://shopify/Customer/"
PRODUCT_GID_PREFIX = "gid://shopify/Product/"


def customer_gid(customer_id) -> str:
    cid = str(customer_id)
    return cid if cid.startswith("gid://") else f"{CUSTOMER_GID_PREFIX}{cid}"

def bare_customer_id(customer_id) -> str:
    return str(customer_id).replace(CUSTOMER_GID_PREFIX, "")

def product_gid(product_id) -> str:
    pid = str(product_id)
    return pid if pid.startswith("gid://") else f"{PRODUCT_GID_PREFIX}{pid}"

def bare_product_id(product_id) -> str:
    return str(product_id).replace(PRODUCT_GID_PREFIX, "")


def _json_or_raise(r):
    try:
        return r.json()
    except ValueError as e:
        raise RemoteError(f"REST API Error: {r.status_code} - invalid JSON response: {r.text[:200]}") from e


def rest_headers(token: str) -> dict:
    return {"Content-Type": "application/json", "X-Shopify-Access-Token": token or ""}


class ShopifyClient:
    """Admin API access: GraphQL against the store URL, REST against the shop domain."""

    def __init__(self, config: ShopifyConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(rest_headers(config.access_token))

    @property
    def graphql_url(self) -> str:
        return f"{self.config.store_url}/admin/api/{self.config.graphql_version}/graphql.json"

    def admin_base(self) -> str:
        return f"https://{self.config.shop_domain}/admin/api/{self.config.rest_version}"

    def query(self, document: str, variables: Optional[dict] = None) -> dict:
        try:
            r = self.session.post(self.graphql_url,
                                  json={"query": document, "variables": variables or {}},
                                  timeout=self.config.timeout)
        except requests.RequestException as e:
            error(f"Shopify GraphQL request failed: {e}")
            raise RemoteError(f"GraphQL request failed: {e}") from e

        if r.status_code >= 400:
            error(f"Shopify GraphQL request failed: HTTP {r.status_code}")
            raise RemoteError(f"GraphQL HTTP {r.status_code}: {r.text}")

        try:
            payload = r.json() or {}
        except ValueError as e:
            raise RemoteError(f"GraphQL HTTP {r.status_code}: invalid JSON response: {r.text[:200]}") from e
        if payload.get("errors"):
            msg = f"GraphQL Error: {json.dumps(payload['errors'])}"
            error(f"Shopify GraphQL request failed: {msg}")
            raise RemoteError(msg)
        return payload.get("data") or {}

    def rest_read(self, path: str) -> Optional[dict]:
        try:
            r = self.session.get(f"{self.admin_base()}/{path}", timeout=self.config.timeout)
        except requests.RequestException as e:
            raise RemoteError(f"REST API request failed: {e}") from e
        if r.status_code == 200:
            return _json_or_raise(r)
        return None

    def rest_write(self, path: str, method: str, body: dict) -> dict:
        try:
            r = self.session.request(method, f"{self.admin_base()}/{path}",
                                     json=body, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise RemoteError(f"REST API request failed: {e}") from e
        if r.status_code not in (200, 201):
            raise RemoteError(f"REST API Error: {r.status_code} - {r.text}")
        return _json_or_raise(r)
