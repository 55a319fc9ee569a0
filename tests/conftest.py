import json

import pytest

from wishlist_api import create_app
from wishlist_api.config import ShopifyConfig, WISHLIST_KEY, WISHLIST_NAMESPACE
from wishlist_api.errors import RemoteError

STORE_URL = "https://test-store.myshopify.com"


class FakeShopify:
    """In-memory stand-in for ShopifyClient: customer metafields and products."""

    def __init__(self):
        self.customers = {"123", "456"}
        self.products = {
            "111": {"id": "gid://shopify/Product/111", "handle": "blue-mug", "title": "Blue Mug"},
            "222": {"id": "gid://shopify/Product/222", "handle": "red-mug", "title": "Red Mug"},
        }
        self.metafields = {}  # bare customer id -> {"id", "value"}
        self.calls = []
        self.graphql_user_errors = []
        self.graphql_write_raises = False
        self.graphql_write_empty = False
        self.product_lookup_raises = False
        self.rest_write_raises = False
        self._next_id = 9000

    # helpers ------------------------------------------------------------

    def stored(self, cid="123"):
        mf = self.metafields.get(cid)
        return json.loads(mf["value"]) if mf else None

    def seed(self, cid, value):
        self._next_id += 1
        self.metafields[cid] = {"id": self._next_id, "value": value if isinstance(value, str) else json.dumps(value)}

    # client contract ----------------------------------------------------

    def query(self, document, variables=None):
        variables = variables or {}
        if "metafieldsSet" in document:
            self.calls.append(("graphql_write", variables))
            if self.graphql_write_raises:
                raise RemoteError("GraphQL Error: [{\"message\": \"Throttled\"}]")
            if self.graphql_write_empty:
                return {"metafieldsSet": None}
            if self.graphql_user_errors:
                return {"metafieldsSet": {"metafields": None, "userErrors": self.graphql_user_errors}}
            mf = variables["metafields"][0]
            cid = mf["ownerId"].split("/")[-1]
            if cid in self.metafields:
                self.metafields[cid]["value"] = mf["value"]
            else:
                self.seed(cid, mf["value"])
            return {"metafieldsSet": {"metafields": [mf], "userErrors": []}}

        if "nodes(ids" in document:
            self.calls.append(("lookup", variables))
            if self.product_lookup_raises:
                raise RemoteError("GraphQL Error: [{\"message\": \"Access denied\"}]")
            return {"nodes": [self.products.get(gid.split("/")[-1]) for gid in variables["ids"]]}

        self.calls.append(("read", variables))
        cid = variables["id"].split("/")[-1]
        if cid not in self.customers:
            return {"customer": None}
        edges = []
        if cid in self.metafields:
            mf = self.metafields[cid]
            edges.append({"node": {
                "id": f"gid://shopify/Metafield/{mf['id']}",
                "namespace": WISHLIST_NAMESPACE,
                "key": WISHLIST_KEY,
                "value": mf["value"],
                "type": "json",
            }})
        return {"customer": {"id": variables["id"], "metafields": {"edges": edges}}}

    def rest_read(self, path):
        self.calls.append(("rest_read", path))
        cid = path.split("/")[1]
        mf = self.metafields.get(cid)
        if not mf:
            return {"metafields": []}
        return {"metafields": [{"id": mf["id"], "namespace": WISHLIST_NAMESPACE,
                                "key": WISHLIST_KEY, "value": mf["value"]}]}

    def rest_write(self, path, method, body):
        self.calls.append(("rest_write", method, path, body))
        if self.rest_write_raises:
            raise RemoteError("REST API Error: 422 - {\"errors\":\"invalid\"}")
        cid = path.split("/")[1]
        value = body["metafield"]["value"]
        if method == "PUT":
            self.metafields[cid]["value"] = value
        else:
            self.seed(cid, value)
        return {"metafield": {"id": self.metafields[cid]["id"], **body["metafield"]}}

    def kinds(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def shopify():
    return FakeShopify()


@pytest.fixture
def config():
    return ShopifyConfig(
        store_url=STORE_URL,
        access_token="shpat_test",
        shop_domain="test-store.myshopify.com",
        development_host="localhost",
        mode="production",
    )


@pytest.fixture
def app(config, shopify):
    app = create_app(config, client=shopify)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    c = app.test_client()
    c.environ_base["HTTP_ORIGIN"] = STORE_URL
    return c
