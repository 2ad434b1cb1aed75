# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - persistence, identity and entity workflows.
"""

from .mongodb import MongoDBService, get_mongodb_service, close_mongodb_connection
from .repositories import Repositories
from .integrity import IntegrityService
from .auth import AuthService, TokenValidationError
from .communities import CommunityService
from .inhabitants import InhabitantService
from .orders import OrderService
from .users import UserService

__all__ = [
    "MongoDBService",
    "get_mongodb_service",
    "close_mongodb_connection",
    "Repositories",
    "IntegrityService",
    "AuthService",
    "TokenValidationError",
    "CommunityService",
    "InhabitantService",
    "OrderService",
    "UserService",
]
