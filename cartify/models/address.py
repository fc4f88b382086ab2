from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Index
from datetime import datetime
from cartify.models.user import Base


ADDRESS_TAGS = ("home", "work", "other")


class Address(Base):
    __tablename__ = "addresses"
    __table_args__ = (
        Index("ix_addresses_user_created", "user_id", "created_at"),
        Index("ix_addresses_user_default_shipping", "user_id", "is_default_shipping"),
        Index("ix_addresses_user_default_billing", "user_id", "is_default_billing"),
        Index("ix_addresses_user_current", "user_id", "is_current_address"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    label = Column(String(100), default="Home")
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), default="")
    landmark = Column(String(255), default="")
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=False)
    tag = Column(String(10), default="home")  # home, work, other
    is_default_shipping = Column(Boolean, default=False, nullable=False)
    is_default_billing = Column(Boolean, default=False, nullable=False)
    is_current_address = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
