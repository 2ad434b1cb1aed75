# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.

Services and endpoints run against an in-memory stand-in for the pymongo
collections, so no MongoDB server is needed.
"""

import os
import copy
import pytest
from types import SimpleNamespace
from typing import Any, Dict, List
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'
os.environ['MONGODB_DATABASE'] = 'assistencia_test'

from assistencia.app import create_app
from assistencia.services.auth import AuthService
from assistencia.services.mongodb import MongoDBService
from assistencia.services.repositories import Repositories
from assistencia.services.integrity import IntegrityService
from assistencia.services.communities import CommunityService
from assistencia.services.inhabitants import InhabitantService
from assistencia.services.orders import OrderService
from assistencia.services.users import UserService

VALID_CPFS = ["52998224725", "11144477735", "12345678909"]


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, expected in query.items():
        value = document.get(key)
        if isinstance(expected, dict):
            for operator, operand in expected.items():
                if value is None:
                    return False
                if operator == "$gte" and not value >= operand:
                    return False
                if operator == "$lt" and not value < operand:
                    return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    """Iterable result of FakeCollection.find with ``sort`` support."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    def sort(self, key: str, direction: int = ASCENDING):
        self.documents.sort(key=lambda doc: doc.get(key), reverse=direction != ASCENDING)
        return self

    def __iter__(self):
        return iter(self.documents)


class FakeCollection:
    """The subset of pymongo.collection.Collection used by MongoDBService."""

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.indexes: List[Any] = []

    def insert_one(self, document):
        if any(doc["_id"] == document["_id"] for doc in self.documents):
            raise DuplicateKeyError(f"duplicate _id {document['_id']}")
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    def find_one(self, query):
        for doc in self.documents:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(doc) for doc in self.documents if _matches(doc, query or {})])

    def update_one(self, query, update):
        for doc in self.documents:
            if _matches(doc, query):
                doc.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    def delete_one(self, query):
        for index, doc in enumerate(self.documents):
            if _matches(doc, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return str(keys)

    def count_documents(self, query):
        return sum(1 for doc in self.documents if _matches(doc, query))


class FakeDatabase:
    """Dict of FakeCollections that answers ``ping``."""

    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}
        self.healthy = True

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    def command(self, name: str):
        if not self.healthy:
            raise ConnectionError("store unreachable")
        return {"ok": 1}


@pytest.fixture(scope="session")
def auth_service():
    """Auth service with a generated key pair and the cheapest bcrypt cost."""
    return AuthService(salt_rounds=4)


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def mongodb_service(fake_db):
    return MongoDBService(database=fake_db)


@pytest.fixture
def repositories(mongodb_service):
    return Repositories(mongodb_service)


@pytest.fixture
def integrity(repositories):
    return IntegrityService(repositories)


@pytest.fixture
def user_service(repositories, integrity, auth_service):
    return UserService(repositories, integrity, auth_service)


@pytest.fixture
def community_service(repositories, integrity):
    return CommunityService(repositories, integrity)


@pytest.fixture
def inhabitant_service(repositories, integrity):
    return InhabitantService(repositories, integrity)


@pytest.fixture
def order_service(repositories, integrity, inhabitant_service):
    return OrderService(repositories, integrity, inhabitant_service)


@pytest.fixture
def sample_user_data():
    """Sample signup payload."""
    return {
        "name": "Maria Souza",
        "email": "maria@example.com",
        "password": "segredo1",
        "userType": "Bolsa Família"
    }


@pytest.fixture
def sample_inhabitant_data():
    """Sample inhabitant payload without a community."""
    return {
        "name": "José da Silva",
        "cpf": "529.982.247-25",
        "numberPhone": "83999990000",
        "address": {"street": "Rua das Flores", "number": "120"}
    }


@pytest.fixture
def registered_user(user_service, sample_user_data):
    return user_service.create(sample_user_data)


@pytest.fixture
def community(community_service):
    return community_service.create({"name": "Vila Nova"})


@pytest.fixture
def inhabitant(inhabitant_service, sample_inhabitant_data, community):
    return inhabitant_service.create(dict(sample_inhabitant_data, communityID=community.id))


@pytest.fixture
def app(mongodb_service, auth_service):
    """Application wired to the in-memory store."""
    application = create_app(mongodb_service=mongodb_service, auth_service=auth_service)
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(auth_service, registered_user):
    token = auth_service.sign_token(registered_user.id)
    return {"Authorization": f"Bearer {token}"}
