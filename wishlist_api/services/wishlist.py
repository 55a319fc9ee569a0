# wishlist_api/services/wishlist.py
from datetime import datetime, timezone
from typing import List, Tuple

from ..clients.shopify import ShopifyClient, bare_product_id, product_gid
from ..errors import ConflictError, NotFoundError
from ..utils.logger import info, warn, error
from .metafields import MetafieldSync, Wishlist

ADDED_FROM = "shopify-store"

PRODUCTS_BY_ID = """
query getProducts($ids: [ID!]!) {
  nodes(ids: $ids) {
    ... on Product {
      id
      handle
      title
    }
  }
}
"""


def _fallback_product(pid: str) -> dict:
    return {"id": pid, "handle": None, "title": f"Product {pid}"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WishlistService:
    def __init__(self, client: ShopifyClient, sync: MetafieldSync = None):
        self.client = client
        self.sync = sync or MetafieldSync(client)

    def lookup_products(self, product_ids: List[str]) -> List[dict]:
        """Resolve handle/title for each id in one query; never raises."""
        ids = [bare_product_id(p) for p in (product_ids or [])]
        if not ids:
            return []
        try:
            data = self.client.query(PRODUCTS_BY_ID, {"ids": [product_gid(p) for p in ids]})
            nodes = data.get("nodes") or []
        except Exception as e:
            error(f"Error getting product details: {e}")
            return [_fallback_product(p) for p in ids]

        out = []
        for pid, node in zip(ids, nodes + [None] * (len(ids) - len(nodes))):
            if not node or not node.get("id"):
                warn(f"[wishlist] no product details for {pid}")
                out.append(_fallback_product(pid))
                continue
            out.append({
                "id": bare_product_id(node["id"]),
                "handle": node.get("handle"),
                "title": node.get("title"),
            })
        return out

    def get(self, customer_id) -> Wishlist:
        return self.sync.read(customer_id)

    def add(self, customer_id, product_id) -> Tuple[dict, int]:
        pid = bare_product_id(product_id)
        wishlist = self.sync.read(customer_id)
        if wishlist.has(pid):
            raise ConflictError("This product is already in the customer's wishlist")

        details = self.lookup_products([pid])[0]
        entry = {
            **details,
            "addedAt": _now_iso(),
            "addedFrom": ADDED_FROM,
        }
        wishlist.append(entry)
        self.sync.write(customer_id, wishlist)
        info(f"[wishlist] added {pid} for {customer_id} ({len(wishlist)} items)")
        return entry, len(wishlist)

    def remove(self, customer_id, product_id) -> int:
        pid = bare_product_id(product_id)
        wishlist = self.sync.read(customer_id)
        remaining = wishlist.without(pid)
        if len(remaining) == len(wishlist):
            raise NotFoundError("Product not found in wishlist")

        self.sync.write(customer_id, remaining)
        info(f"[wishlist] removed {pid} for {customer_id} ({len(remaining)} items)")
        return len(remaining)
