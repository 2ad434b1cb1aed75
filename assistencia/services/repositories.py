# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Per-entity persistence gateways on top of MongoDBService.

Each repository maps one collection to one entity model and exposes only the
lookups the services need. None of them enforce references or uniqueness;
that is done by the integrity service before writes.
"""

import logging
from datetime import datetime
from typing import Generic, List, Optional, Type, TypeVar

from ..models.base import BaseEntity
from ..models.entities import Community, Inhabitant, Order, User
from .mongodb import MongoDBService

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseEntity)


class MongoRepository(Generic[E]):
    """Collection-backed gateway for one entity type."""

    collection_name: str = ""
    entity_class: Type[E]

    def __init__(self, mongodb_service: MongoDBService):
        self.mongodb_service = mongodb_service

    def _to_entity(self, document: Optional[dict]) -> Optional[E]:
        if document is None:
            return None
        return self.entity_class.from_document(document)

    def insert(self, entity: E) -> E:
        self.mongodb_service.insert(self.collection_name, entity.to_document())
        return entity

    def find_by_id(self, entity_id: str) -> Optional[E]:
        if not entity_id:
            return None
        return self.find_one_by(_id=entity_id)

    def find_one_by(self, **query) -> Optional[E]:
        return self._to_entity(self.mongodb_service.find_one(self.collection_name, query))

    def list(self, **query) -> List[E]:
        documents = self.mongodb_service.find(self.collection_name, query or None)
        return [self.entity_class.from_document(doc) for doc in documents]

    def update(self, entity: E) -> bool:
        document = entity.to_document()
        doc_id = document.pop("_id")
        return self.mongodb_service.update(self.collection_name, doc_id, document)

    def delete(self, entity_id: str) -> bool:
        return self.mongodb_service.delete(self.collection_name, entity_id)


class UserRepository(MongoRepository[User]):
    collection_name = "users"
    entity_class = User

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_one_by(email=email)


class CommunityRepository(MongoRepository[Community]):
    collection_name = "communities"
    entity_class = Community

    def find_by_name(self, name: str) -> Optional[Community]:
        return self.find_one_by(name=name)


class InhabitantRepository(MongoRepository[Inhabitant]):
    collection_name = "inhabitants"
    entity_class = Inhabitant

    def find_by_cpf(self, cpf: str) -> Optional[Inhabitant]:
        return self.find_one_by(cpf=cpf)

    def find_by_community(self, community_id: str) -> Optional[Inhabitant]:
        """First inhabitant referencing the community, if any."""
        return self.find_one_by(communityID=community_id)


class OrderRepository(MongoRepository[Order]):
    collection_name = "orders"
    entity_class = Order

    def find_created_between(self, start: datetime, end: datetime) -> List[Order]:
        """Orders whose creation timestamp falls in [start, end)."""
        documents = self.mongodb_service.find(
            self.collection_name,
            {"date": {"$gte": start, "$lt": end}},
            sort_by="date"
        )
        return [Order.from_document(doc) for doc in documents]


class Repositories:
    """Bundle of every gateway sharing one MongoDBService."""

    def __init__(self, mongodb_service: MongoDBService):
        self.users = UserRepository(mongodb_service)
        self.communities = CommunityRepository(mongodb_service)
        self.inhabitants = InhabitantRepository(mongodb_service)
        self.orders = OrderRepository(mongodb_service)
