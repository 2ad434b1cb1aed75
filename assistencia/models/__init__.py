# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic data models for the social-assistance platform.
"""

from .base import BaseEntity, generate_id
from .enums import UserRole, OrderStatus
from .entities import User, Community, Address, Inhabitant, Order

__all__ = [
    "BaseEntity",
    "generate_id",
    "UserRole",
    "OrderStatus",
    "User",
    "Community",
    "Address",
    "Inhabitant",
    "Order",
]
