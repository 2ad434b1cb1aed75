# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the social-assistance platform.

Field constraints live in ``domain.validation``; these models only describe
the stored shape. Services validate candidates before building entities.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from .base import BaseEntity
from .enums import OrderStatus, UserRole


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseEntity):
    """Caseworker account."""
    
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Login email, unique")
    password: str = Field(..., description="bcrypt password hash")
    userType: UserRole = Field(default=UserRole.DEFAULT, description="Caseworker category")
    
    def to_response(self) -> Dict[str, Any]:
        """Serialize without the password hash."""
        data = super().to_response()
        data.pop("password", None)
        return data


class Community(BaseEntity):
    """Named administrative zone."""
    
    name: str = Field(..., description="Community name, unique")


class Address(BaseModel):
    """Inhabitant address."""
    
    model_config = ConfigDict(extra="ignore")
    
    street: str = Field(..., description="Street name")
    number: str = Field(..., description="House number")
    community: Optional[str] = Field(None, description="Embedded community name (legacy records)")


class Inhabitant(BaseEntity):
    """Beneficiary registered by CPF."""
    
    name: str = Field(..., description="Full name")
    cpf: str = Field(..., description="National ID, digits only, unique")
    numberPhone: Optional[str] = Field(None, description="Contact phone")
    address: Address = Field(..., description="Home address")
    communityID: Optional[str] = Field(None, description="Owning community id")
    
    def community_name_hint(self) -> Optional[str]:
        """Community name embedded by the older address schema, if any."""
        return self.address.community


class Order(BaseEntity):
    """Service request filed by a user on behalf of an inhabitant."""
    
    content: str = Field(..., description="Request description")
    userID: str = Field(..., description="Filing user id")
    inhabitantID: str = Field(..., description="Beneficiary id")
    status: OrderStatus = Field(default=OrderStatus.PENDING, description="Workflow status")
    date: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    date_update: datetime = Field(default_factory=utcnow, description="Last update timestamp")
    
    def touch(self) -> None:
        """Refresh the update timestamp."""
        self.date_update = utcnow()
