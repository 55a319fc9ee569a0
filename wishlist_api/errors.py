class WishlistError(Exception):
    """Base error; `status` is the HTTP code the API answers with."""

    status = 500
    title = "Something went wrong!"

    def __init__(self, message: str, title: str | None = None):
        super().__init__(message)
        self.message = message
        if title:
            self.title = title

    def to_dict(self) -> dict:
        return {"error": self.title, "message": self.message}


class ValidationError(WishlistError):
    status = 400
    title = "Missing required fields"


class AuthorizationError(WishlistError):
    status = 403
    title = "Forbidden"


class ConflictError(WishlistError):
    status = 409
    title = "Product already in wishlist"


class NotFoundError(WishlistError):
    status = 404
    title = "Product not found"


class RemoteError(WishlistError):
    """Upstream GraphQL/REST failure."""

    status = 500
    title = "Shopify request failed"
