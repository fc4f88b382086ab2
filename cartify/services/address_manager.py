"""Address default-flag consistency.

For every owner at most one address is the default shipping address, at
most one is the default billing address and at most one is the current
address; a current address is always the default shipping address too.
Conflicting flags are cleared on the owner's other addresses before a new
one is written. The clear and the write are separate store calls, so two
concurrent requests for the same owner can still race.
"""
import logging

from cartify.errors import NotFoundError, ValidationError
from cartify.models.address import ADDRESS_TAGS

logger = logging.getLogger(__name__)

DEFAULT_SHIPPING = "is_default_shipping"
DEFAULT_BILLING = "is_default_billing"
CURRENT_ADDRESS = "is_current_address"
FLAGS = (DEFAULT_SHIPPING, DEFAULT_BILLING, CURRENT_ADDRESS)

DEFAULT_KINDS = {"shipping": DEFAULT_SHIPPING, "billing": DEFAULT_BILLING}

REQUIRED_FIELDS = ("address_line1", "city", "state", "postal_code")
TEXT_FIELDS = ("label", "address_line1", "address_line2", "landmark", "city", "state", "postal_code")

_TRUTHY = {"true", "1", "yes", "y", "on"}
_FALSY = {"false", "0", "no", "n", "off"}

# Never taken from a patch
_IMMUTABLE = {"id", "user_id", "created_at"}


def normalize_bool(value, fallback=False):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in _TRUTHY:
            return True
        if lower in _FALSY:
            return False
    elif isinstance(value, (int, float)):
        return value == 1
    return fallback


def normalize_tag(value):
    if not isinstance(value, str):
        return "home"
    tag = value.strip().lower()
    return tag if tag in ADDRESS_TAGS else "other"


def _clean_text(field, value):
    text = "" if value is None else str(value).strip()
    if field == "label" and not text:
        return "Home"
    return text


def sanitize_address_fields(fields, partial=False):
    """Normalize raw address fields.

    With ``partial`` only the keys present in ``fields`` are returned, which
    is what an update patch needs; otherwise every field gets a value.
    """
    keys = set(fields) if partial else set(TEXT_FIELDS) | set(FLAGS) | {"tag"}
    clean = {}
    for key in keys:
        value = fields.get(key)
        if key in TEXT_FIELDS:
            clean[key] = _clean_text(key, value)
        elif key in FLAGS:
            clean[key] = normalize_bool(value)
        elif key == "tag":
            clean[key] = normalize_tag(value)
    return clean


def _check_required(fields):
    missing = [f for f in REQUIRED_FIELDS if f in fields and not fields[f]]
    if missing:
        raise ValidationError("Address line, city, state, and postal code are required")


class AddressConsistencyManager:
    """Address operations that keep the per-owner flag invariants.

    ``store`` is any collection exposing find_many/find_one/insert_one/
    update_many/update_one/delete_one (see ``cartify.utils.address_store``).
    """

    def __init__(self, store):
        self.store = store

    def clear_flag(self, owner_id, flag, except_id=None):
        count = self.store.update_many({"user_id": owner_id, flag: True}, {flag: False}, exclude_id=except_id)
        logger.debug("Cleared %s on %d address(es) for user %s", flag, count, owner_id)
        return count

    def _clear_conflicting(self, owner_id, fields, except_id=None):
        # Mutates fields: a current address is always the default shipping one
        if fields.get(CURRENT_ADDRESS):
            self.clear_flag(owner_id, CURRENT_ADDRESS, except_id)
            fields[DEFAULT_SHIPPING] = True
        if fields.get(DEFAULT_SHIPPING):
            if not fields.get(CURRENT_ADDRESS):
                # An address losing default shipping cannot stay current
                self.clear_flag(owner_id, CURRENT_ADDRESS, except_id)
            self.clear_flag(owner_id, DEFAULT_SHIPPING, except_id)
        if fields.get(DEFAULT_BILLING):
            self.clear_flag(owner_id, DEFAULT_BILLING, except_id)

    def create_address(self, owner_id, fields):
        payload = sanitize_address_fields(fields)
        _check_required(payload)
        self._clear_conflicting(owner_id, payload)
        payload["user_id"] = owner_id
        address = self.store.insert_one(payload)
        logger.info("Created address %s for user %s", address.id, owner_id)
        return address

    def get_address(self, address_id):
        return self.store.find_one({"id": address_id})

    def update_address(self, address_id, fields):
        existing = self.get_address(address_id)
        if existing is None:
            raise NotFoundError(f"Address {address_id} not found")

        patch = sanitize_address_fields({k: v for k, v in fields.items() if k not in _IMMUTABLE}, partial=True)
        _check_required(patch)
        if patch.get(DEFAULT_SHIPPING) is False and not patch.get(CURRENT_ADDRESS):
            patch[CURRENT_ADDRESS] = False

        self._clear_conflicting(existing.user_id, patch, except_id=address_id)
        address = self.store.update_one({"id": address_id}, patch)
        if address is None:
            # Deleted between the lookup and the write
            raise NotFoundError(f"Address {address_id} not found")
        logger.info("Updated address %s for user %s", address_id, address.user_id)
        return address

    def delete_address(self, address_id):
        address = self.store.delete_one(address_id)
        if address is None:
            raise NotFoundError(f"Address {address_id} not found")
        logger.info("Deleted address %s for user %s", address_id, address.user_id)
        return address

    def set_default_address(self, owner_id, address_id, kind="shipping"):
        flag = DEFAULT_KINDS.get(kind)
        if flag is None:
            raise ValidationError(f"Unknown default kind: {kind!r}")
        if self.store.find_one({"id": address_id, "user_id": owner_id}) is None:
            raise NotFoundError(f"Address {address_id} not found")

        self.clear_flag(owner_id, flag)
        if flag == DEFAULT_SHIPPING:
            # Only clears the current address; the target is not made current
            self.clear_flag(owner_id, CURRENT_ADDRESS)
        return self.store.update_one({"id": address_id, "user_id": owner_id}, {flag: True})

    def set_current_address(self, owner_id, address_id):
        """Make ``address_id`` the owner's current and default shipping address.

        Returns ``None`` without raising when the address is not the owner's;
        the owner's previous current/default shipping flags are cleared anyway.
        """
        self.clear_flag(owner_id, CURRENT_ADDRESS)
        self.clear_flag(owner_id, DEFAULT_SHIPPING)
        address = self.store.update_one(
            {"id": address_id, "user_id": owner_id},
            {CURRENT_ADDRESS: True, DEFAULT_SHIPPING: True},
        )
        if address is None:
            logger.info("Address %s is not owned by user %s; current address left unset", address_id, owner_id)
        return address

    def list_addresses_for_owner(self, owner_id):
        return self.store.find_many({"user_id": owner_id}, order_by=("-is_default_shipping", "-created_at", "-id"))
