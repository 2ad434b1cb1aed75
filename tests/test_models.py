# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for entity models and enumerations.
"""

import pytest
from datetime import datetime, timezone

from assistencia.models import Address, Inhabitant, Order, OrderStatus, User, UserRole
from assistencia.domain.formatting import UNKNOWN, display_name, format_date


class TestOrderStatus:
    """Test status parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("Pending", OrderStatus.PENDING),
        ("rejected", OrderStatus.REJECTED),
        ("ATTENDED", OrderStatus.ATTENDED),
        ("Pendente", OrderStatus.PENDING),
        ("negado", OrderStatus.REJECTED),
        ("Atendido", OrderStatus.ATTENDED),
    ])
    def test_parse_known_values(self, value, expected):
        """Test canonical, name and legacy inputs."""
        assert OrderStatus.parse(value) is expected

    @pytest.mark.parametrize("value", ["Done", "", None, 3])
    def test_parse_unknown_values(self, value):
        """Test that anything else is not a status."""
        assert OrderStatus.parse(value) is None


class TestEntities:
    """Test entity serialization."""

    def test_user_response_hides_password(self):
        """Test that the password hash never reaches a response."""
        user = User(name="Maria Souza", email="maria@example.com", password="$2b$04$hash")

        data = user.to_response()

        assert "password" not in data
        assert data["userType"] == UserRole.DEFAULT.value
        assert data["_id"] == user.id

    def test_document_uses_underscore_id(self):
        """Test that documents are keyed by _id."""
        order = Order(content="Cesta básica", userID="u1", inhabitantID="i1")

        document = order.to_document()

        assert document["_id"] == order.id
        assert document["status"] == "Pending"
        assert Order.from_document(document).id == order.id

    def test_ids_are_unique(self):
        """Test identifier generation."""
        assert Order(content="abcde", userID="u", inhabitantID="i").id != \
            Order(content="abcde", userID="u", inhabitantID="i").id

    def test_touch_refreshes_update_timestamp(self):
        """Test that touch moves date_update forward only."""
        created = datetime(2020, 1, 1, tzinfo=timezone.utc)
        order = Order(content="abcde", userID="u", inhabitantID="i", date=created, date_update=created)

        order.touch()

        assert order.date == created
        assert order.date_update > created

    def test_legacy_embedded_community(self):
        """Test that older inhabitant documents keep their embedded community name."""
        inhabitant = Inhabitant.from_document({
            "_id": "abc",
            "name": "José da Silva",
            "cpf": "52998224725",
            "address": {"street": "Rua A", "number": "1", "community": "Vila Velha"}
        })

        assert inhabitant.communityID is None
        assert inhabitant.community_name_hint() == "Vila Velha"


class TestFormatting:
    """Test report formatting helpers."""

    def test_format_date(self):
        """Test DD/MM/YYYY output from datetimes and ISO strings."""
        assert format_date(datetime(2024, 3, 5, tzinfo=timezone.utc)) == "05/03/2024"
        assert format_date("2024-12-31T10:00:00Z") == "31/12/2024"
        assert format_date(None) is None

    def test_display_name(self):
        """Test the unknown sentinel for missing joins."""
        assert display_name(Address(street="Rua A", number="1")) == UNKNOWN
        assert display_name(None) == UNKNOWN
        assert display_name(User(name="Maria Souza", email="m@e.com", password="x")) == "Maria Souza"
