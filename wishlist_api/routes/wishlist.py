# wishlist_api/routes/wishlist.py
from flask import Blueprint, current_app, request

from ..errors import RemoteError, ValidationError
from ..extensions import api_limit
from ..utils.logger import info, error
from ..utils.security import require_store_origin

bp = Blueprint("wishlist", __name__)
bp.before_request(require_store_origin)


def _service():
    return current_app.extensions["wishlist"]

def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _ids_from_body():
    data = _body()
    customer_id, product_id = data.get("customerId"), data.get("productId")
    if not customer_id or not product_id:
        raise ValidationError("customerId and productId are required")
    return customer_id, product_id


@bp.post("/add")
@api_limit
def add():
    customer_id, product_id = _ids_from_body()
    try:
        product, count = _service().add(str(customer_id), str(product_id))
    except RemoteError as e:
        error(f"Error adding to wishlist: {e}")
        raise RemoteError(e.message, title="Failed to add product to wishlist") from e

    return {
        "success": True,
        "message": "Product added to wishlist successfully",
        "data": {"customerId": customer_id, "product": product, "wishlistCount": count},
    }, 201


@bp.get("")
@api_limit
def get():
    customer_id = request.args.get("customerId")
    if not customer_id:
        raise ValidationError("customerId is required", title="Missing required parameter")

    info("Authorized wishlist get request")
    try:
        wishlist = _service().get(customer_id)
    except RemoteError as e:
        error(f"Error fetching wishlist: {e}")
        raise RemoteError(e.message, title="Failed to fetch wishlist") from e

    return {
        "success": True,
        "data": {"customerId": customer_id, "wishlist": list(wishlist), "count": len(wishlist)},
    }, 200


@bp.delete("/remove")
@api_limit
def remove():
    customer_id, product_id = _ids_from_body()
    try:
        count = _service().remove(str(customer_id), str(product_id))
    except RemoteError as e:
        error(f"Error removing from wishlist: {e}")
        raise RemoteError(e.message, title="Failed to remove product from wishlist") from e

    return {
        "success": True,
        "message": "Product removed from wishlist successfully",
        "data": {"customerId": customer_id, "productId": product_id, "wishlistCount": count},
    }, 200
