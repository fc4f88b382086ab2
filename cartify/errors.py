"""Error taxonomy shared by the address service and its HTTP handlers."""


class CartifyError(Exception):
    pass


class ValidationError(CartifyError):
    """Required fields missing or a value outside its allowed set."""


class NotFoundError(CartifyError):
    """Referenced address or owner does not exist."""


class StorageError(CartifyError):
    """The persistence layer failed (connectivity, timeout, constraint)."""
