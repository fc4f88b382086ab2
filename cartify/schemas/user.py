from pydantic import BaseModel, EmailStr, Field
from typing import Literal


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=30)
    firstName: str = ""
    lastName: str = ""
    phoneNumber: str | None = None
    userRole: Literal["customer", "seller", "admin"] = "customer"


class UserOut(BaseModel):
    id: int
    email: EmailStr
    username: str
    firstName: str | None = None
    lastName: str | None = None
    phoneNumber: str | None = None
    userRole: str
    isAccountActive: bool
