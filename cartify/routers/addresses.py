from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Literal
import logging

from cartify.errors import NotFoundError, StorageError, ValidationError
from cartify.models.address import Address
from cartify.models.user import UserAccount, get_db
from cartify.schemas.address import AddressOut, AddressCreate, AddressUpdate, AddressFields
from cartify.services.address_manager import AddressConsistencyManager
from cartify.utils.address_store import AddressStore

logger = logging.getLogger(__name__)

router = APIRouter()

# API (camelCase) -> column names
_FIELD_MAP = {
    "label": "label",
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "landmark": "landmark",
    "city": "city",
    "state": "state",
    "postalCode": "postal_code",
    "tag": "tag",
    "isDefaultShipping": "is_default_shipping",
    "isDefaultBilling": "is_default_billing",
    "isCurrentAddress": "is_current_address",
}


def get_address_manager(db: Session = Depends(get_db)) -> AddressConsistencyManager:
    return AddressConsistencyManager(AddressStore(db))


def _to_out(a: Address) -> AddressOut:
    return AddressOut(
        id=a.id,
        userId=a.user_id,
        label=a.label or "",
        addressLine1=a.address_line1,
        addressLine2=a.address_line2 or "",
        landmark=a.landmark or "",
        city=a.city,
        state=a.state,
        postalCode=a.postal_code,
        tag=a.tag,
        isDefaultShipping=a.is_default_shipping,
        isDefaultBilling=a.is_default_billing,
        isCurrentAddress=a.is_current_address,
        createdAt=a.created_at,
        updatedAt=a.updated_at,
    )


def _to_fields(payload: AddressFields) -> dict:
    data = payload.model_dump(exclude_unset=True)
    return {_FIELD_MAP[k]: v for k, v in data.items() if k in _FIELD_MAP}


def _ensure_user(db: Session, user_id: int) -> UserAccount:
    try:
        user = db.query(UserAccount).filter(UserAccount.id == user_id).first()
    except SQLAlchemyError as e:
        logger.error("User lookup failed: %s", e)
        db.rollback()
        raise HTTPException(status_code=503, detail="Address storage unavailable")
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _owned_address(manager: AddressConsistencyManager, address_id: int, user_id: int) -> Address:
    address = manager.get_address(address_id)
    if not address or address.user_id != user_id:
        raise HTTPException(status_code=404, detail="Address not found")
    return address


def _raise_http(e: Exception):
    if isinstance(e, ValidationError):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=404, detail="Address not found")
    raise HTTPException(status_code=503, detail="Address storage unavailable")


# List User Addresses
@router.get("/{user_id}", response_model=List[AddressOut])
def list_user_addresses(user_id: int, db: Session = Depends(get_db), manager: AddressConsistencyManager = Depends(get_address_manager)):
    _ensure_user(db, user_id)
    try:
        addresses = manager.list_addresses_for_owner(user_id)
    except StorageError as e:
        _raise_http(e)
    return [_to_out(a) for a in addresses]


# Create Address
@router.post("/", response_model=AddressOut, status_code=201)
def create_user_address(payload: AddressCreate, db: Session = Depends(get_db), manager: AddressConsistencyManager = Depends(get_address_manager)):
    _ensure_user(db, payload.userId)
    try:
        address = manager.create_address(payload.userId, _to_fields(payload))
    except (ValidationError, StorageError) as e:
        _raise_http(e)
    return _to_out(address)


# Update Address
@router.put("/{address_id}", response_model=AddressOut)
def update_user_address(address_id: int, payload: AddressUpdate, db: Session = Depends(get_db), manager: AddressConsistencyManager = Depends(get_address_manager)):
    _ensure_user(db, payload.userId)
    try:
        _owned_address(manager, address_id, payload.userId)
        address = manager.update_address(address_id, _to_fields(payload))
    except (ValidationError, NotFoundError, StorageError) as e:
        _raise_http(e)
    return _to_out(address)


# Delete Address
@router.delete("/{address_id}")
def delete_user_address(address_id: int, userId: int = Query(...), db: Session = Depends(get_db), manager: AddressConsistencyManager = Depends(get_address_manager)):
    _ensure_user(db, userId)
    try:
        _owned_address(manager, address_id, userId)
        manager.delete_address(address_id)
    except (NotFoundError, StorageError) as e:
        _raise_http(e)
    return {"message": "Address removed successfully"}


# Set Default Shipping/Billing Address
@router.put("/{address_id}/default", response_model=AddressOut)
def set_default_address(
    address_id: int,
    userId: int = Query(...),
    kind: Literal["shipping", "billing"] = Query("shipping"),
    db: Session = Depends(get_db),
    manager: AddressConsistencyManager = Depends(get_address_manager),
):
    _ensure_user(db, userId)
    try:
        address = manager.set_default_address(userId, address_id, kind)
    except (ValidationError, NotFoundError, StorageError) as e:
        _raise_http(e)
    if not address:
        raise HTTPException(status_code=404, detail="Address not found")
    return _to_out(address)


# Set Current Address
@router.put("/{address_id}/current", response_model=AddressOut)
def set_current_address(address_id: int, userId: int = Query(...), db: Session = Depends(get_db), manager: AddressConsistencyManager = Depends(get_address_manager)):
    _ensure_user(db, userId)
    try:
        _owned_address(manager, address_id, userId)
        address = manager.set_current_address(userId, address_id)
    except StorageError as e:
        _raise_http(e)
    if not address:
        raise HTTPException(status_code=404, detail="Address not found")
    return _to_out(address)
