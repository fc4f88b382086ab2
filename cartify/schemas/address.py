from pydantic import BaseModel
from typing import Optional, Union
from datetime import datetime

# Flags arrive as real booleans or loose form values ("yes", "1", 0);
# the address manager normalizes them.
FlagValue = Union[bool, int, str, None]


class AddressFields(BaseModel):
    label: Optional[str] = None
    addressLine1: Optional[str] = None
    addressLine2: Optional[str] = None
    landmark: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postalCode: Optional[Union[str, int]] = None
    tag: Optional[str] = None
    isDefaultShipping: FlagValue = None
    isDefaultBilling: FlagValue = None
    isCurrentAddress: FlagValue = None


class AddressCreate(AddressFields):
    userId: int


class AddressUpdate(AddressFields):
    userId: int


class AddressOut(BaseModel):
    id: int
    userId: int
    label: str
    addressLine1: str
    addressLine2: str
    landmark: str
    city: str
    state: str
    postalCode: str
    tag: str
    isDefaultShipping: bool
    isDefaultBilling: bool
    isCurrentAddress: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
