# wishlist_api/services/metafields.py
"""
Read-modify-write of the wishlist metafield.

The whole wishlist lives in one customer metafield (custom.wishlist_products,
type json). Every request reads it fresh, mutates the list in memory and writes
the full list back. There is no lock and no conditional write: concurrent
writers race and the last one wins.

Writes go through GraphQL `metafieldsSet` first and fall back to the REST
metafields endpoint if the mutation raises or returns userErrors. A REST
failure propagates to the caller.
"""
import json
from typing import Callable, List, Optional

from ..clients.shopify import ShopifyClient, bare_customer_id, customer_gid
from ..config import WISHLIST_KEY, WISHLIST_NAMESPACE
from ..errors import RemoteError
from ..utils.logger import debug, info, warn, error

# =========================================================
# GraphQL documents
# =========================================================

CUSTOMER_METAFIELDS = """
query getCustomer($id: ID!) {
  customer(id: $id) {
    id
    email
    firstName
    lastName
    metafields(first: 10, namespace: "custom") {
      edges {
        node {
          id
          namespace
          key
          value
          type
        }
      }
    }
  }
}
"""

METAFIELDS_SET = """
mutation metafieldsSet($metafields: [MetafieldsSetInput!]!) {
  metafieldsSet(metafields: $metafields) {
    metafields {
      id
      namespace
      key
      value
      type
    }
    userErrors {
      field
      message
    }
  }
}
"""


class Wishlist(list):
    """Ordered wishlist entries. `recovered` marks a stored value that failed to parse."""

    def __init__(self, entries=(), recovered: bool = False):
        super().__init__(entries)
        self.recovered = recovered

    def has(self, product_id) -> bool:
        pid = str(product_id)
        return any(str(e.get("id")) == pid for e in self)

    def without(self, product_id) -> "Wishlist":
        pid = str(product_id)
        return Wishlist([e for e in self if str(e.get("id")) != pid])


def _serialize(wishlist: List[dict]) -> str:
    return json.dumps(list(wishlist))


def _parse(raw: str, cid: str) -> Wishlist:
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        warn(f"[wishlist] stored value for {cid} is not valid JSON, recovering as empty: {e}")
        return Wishlist(recovered=True)
    if not isinstance(value, list):
        warn(f"[wishlist] stored value for {cid} is not a list, recovering as empty")
        return Wishlist(recovered=True)
    if not all(isinstance(e, dict) for e in value):
        warn(f"[wishlist] stored value for {cid} has non-object entries, recovering as empty")
        return Wishlist(recovered=True)
    return Wishlist(value)

# =========================================================
# Write channels
# =========================================================

class GraphQLMetafieldWriter:
    name = "graphql"

    def __init__(self, client: ShopifyClient):
        self.client = client

    def write(self, customer_id, wishlist: List[dict]):
        variables = {
            "metafields": [{
                "ownerId": customer_gid(customer_id),
                "namespace": WISHLIST_NAMESPACE,
                "key": WISHLIST_KEY,
                "value": _serialize(wishlist),
                "type": "json",
            }]
        }
        data = self.client.query(METAFIELDS_SET, variables)
        block = data.get("metafieldsSet")
        if not block:
            raise RemoteError("GraphQL Error: metafieldsSet returned no result")
        errs = block.get("userErrors") or []
        if errs:
            error(f"[wishlist] metafieldsSet userErrors: {errs}")
            raise RemoteError(f"GraphQL Error: {errs[0].get('message', '')}")
        info("GraphQL metafield update successful")


class RestMetafieldWriter:
    name = "rest"

    def __init__(self, client: ShopifyClient):
        self.client = client

    def find_metafield_id(self, cid: str) -> Optional[int]:
        existing = self.client.rest_read(f"customers/{cid}/metafields.json") or {}
        for m in existing.get("metafields") or []:
            if m.get("namespace") == WISHLIST_NAMESPACE and m.get("key") == WISHLIST_KEY:
                return m.get("id")
        return None

    def write(self, customer_id, wishlist: List[dict]):
        info("Using REST API to update metafield...")
        cid = bare_customer_id(customer_id)
        body = {"metafield": {
            "namespace": WISHLIST_NAMESPACE,
            "key": WISHLIST_KEY,
            "value": _serialize(wishlist),
            "type": "json",
        }}
        mf_id = self.find_metafield_id(cid)
        if mf_id:
            self.client.rest_write(f"customers/{cid}/metafields/{mf_id}.json", "PUT", body)
        else:
            self.client.rest_write(f"customers/{cid}/metafields.json", "POST", body)
        info(f"REST API metafield {'update' if mf_id else 'create'} successful")

# =========================================================
# Synchronizer
# =========================================================

class MetafieldSync:
    """
    Reads and writes the wishlist blob for a customer.

    `writers` are tried in order; the first to succeed wins and the last
    failure is re-raised. `before_write`, if given, is called with the
    qualified customer id and the list about to be written.
    """

    def __init__(self, client: ShopifyClient, writers=None,
                 before_write: Optional[Callable[[str, List[dict]], None]] = None):
        self.client = client
        self.writers = writers or [GraphQLMetafieldWriter(client), RestMetafieldWriter(client)]
        self.before_write = before_write

    def read(self, customer_id) -> Wishlist:
        gid = customer_gid(customer_id)
        data = self.client.query(CUSTOMER_METAFIELDS, {"id": gid})
        customer = data.get("customer")
        if not customer:
            debug(f"[wishlist] customer not found: {gid}")
            return Wishlist()

        edges = ((customer.get("metafields") or {}).get("edges")) or []
        for edge in edges:
            node = edge.get("node") or {}
            if node.get("namespace") == WISHLIST_NAMESPACE and node.get("key") == WISHLIST_KEY:
                return _parse(node.get("value"), gid)
        return Wishlist()

    def write(self, customer_id, wishlist: List[dict]):
        if self.before_write:
            self.before_write(customer_gid(customer_id), list(wishlist))

        last = len(self.writers) - 1
        for i, writer in enumerate(self.writers):
            try:
                writer.write(customer_id, wishlist)
                return
            except Exception as e:
                if i == last:
                    error(f"[wishlist] {writer.name} metafield update failed: {e}")
                    raise
                warn(f"[wishlist] {writer.name} metafield update failed, trying {self.writers[i + 1].name}: {e}")
