# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Service order workflows and reporting projections.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from opentelemetry import trace

from ..domain.cpf import sanitize_cpf
from ..domain.formatting import UNKNOWN, display_name, format_date
from ..domain.validation import validate_order
from ..middleware.error_handler import (
    NotFoundException,
    PreconditionFailedException,
    ValidationException
)
from ..models.entities import Order, utcnow
from ..models.enums import OrderStatus
from .inhabitants import InhabitantService
from .integrity import IntegrityService
from .repositories import Repositories

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class OrderService:
    """Orchestrates order writes and the order reports."""

    def __init__(self, repositories: Repositories, integrity: IntegrityService,
                 inhabitants: InhabitantService):
        self.repositories = repositories
        self.integrity = integrity
        self.inhabitants = inhabitants

    def create(self, payload: Mapping[str, Any]) -> Order:
        """
        File a new order in Pending status.

        The beneficiary is given either as ``inhabitantID`` or as
        ``inhabitantCPF``; the CPF form is resolved to an id before the
        order is built.

        Raises:
            PreconditionFailedException: content, userID or beneficiary missing
            ValidationException: constraint violations
            ReferenceNotFoundException: user or inhabitant does not exist
        """
        with tracer.start_as_current_span("orders.create") as span:
            content = payload.get("content")
            user_id = payload.get("userID")
            inhabitant_id = payload.get("inhabitantID")
            inhabitant_cpf = payload.get("inhabitantCPF")
            if inhabitant_cpf is not None:
                inhabitant_cpf = sanitize_cpf(inhabitant_cpf)

            if not content or not user_id or not (inhabitant_id or inhabitant_cpf):
                raise PreconditionFailedException("Content, userID, and inhabitantID are required")

            candidate = {
                "content": content,
                "userID": user_id,
                "inhabitantID": inhabitant_id,
                "status": OrderStatus.PENDING.value,
            }
            checked = ["content", "userID", "status"] + (["inhabitantID"] if inhabitant_id else [])
            violations = validate_order(candidate, only=checked)
            if violations:
                raise ValidationException("Invalid order", violations)

            self.integrity.require_user(user_id)
            if inhabitant_id:
                inhabitant = self.integrity.require_inhabitant(inhabitant_id)
            else:
                inhabitant = self.integrity.require_inhabitant_by_cpf(inhabitant_cpf)

            now = utcnow()
            order = Order(content=content, userID=user_id, inhabitantID=inhabitant.id,
                          date=now, date_update=now)
            self.repositories.orders.insert(order)

            span.set_attribute("order.id", order.id)
            logger.info(
                "Order created",
                extra={"order_id": order.id, "user_id": user_id, "inhabitant_id": inhabitant.id}
            )
            return order

    def list(self) -> List[Order]:
        with tracer.start_as_current_span("orders.list"):
            return self.repositories.orders.list()

    def get(self, order_id: str) -> Order:
        with tracer.start_as_current_span("orders.get") as span:
            span.set_attribute("order.id", order_id)
            order = self.repositories.orders.find_by_id(order_id)
            if order is None:
                raise NotFoundException("Order not found")
            return order

    def update(self, order_id: str, payload: Mapping[str, Any]) -> Order:
        """
        Change content and/or status and refresh ``date_update``.

        Unrecognized status strings are rejected instead of falling back
        to Pending.
        """
        with tracer.start_as_current_span("orders.update") as span:
            span.set_attribute("order.id", order_id)
            order = self.get(order_id)

            candidate = order.model_dump()
            changed = []

            if payload.get("content") is not None:
                candidate["content"] = payload["content"]
                changed.append("content")

            status = None
            if payload.get("status") is not None:
                status = OrderStatus.parse(payload["status"])
                candidate["status"] = status.value if status else payload["status"]
                changed.append("status")

            violations = validate_order(candidate, only=changed)
            if violations:
                raise ValidationException("Invalid order", violations)

            if "content" in changed:
                order.content = candidate["content"]
            if status is not None:
                order.status = status
            order.touch()

            self.repositories.orders.update(order)

            span.set_attribute("order.status", order.status)
            logger.info("Order updated", extra={"order_id": order.id, "status": order.status})
            return order

    def delete(self, order_id: str) -> str:
        with tracer.start_as_current_span("orders.delete") as span:
            span.set_attribute("order.id", order_id)

            order = self.get(order_id)
            self.repositories.orders.delete(order.id)

            logger.info("Order deleted", extra={"order_id": order.id})
            return order.id

    # Reports

    def processed_view(self) -> List[Dict[str, Any]]:
        """
        Orders joined with their user (name, role) and inhabitant (name, CPF),
        with both timestamps formatted as DD/MM/YYYY.
        """
        with tracer.start_as_current_span("orders.processed_view") as span:
            users: Dict[str, Any] = {}
            inhabitants: Dict[str, Any] = {}

            rows = []
            for order in self.repositories.orders.list():
                if order.userID not in users:
                    users[order.userID] = self.repositories.users.find_by_id(order.userID)
                if order.inhabitantID not in inhabitants:
                    inhabitants[order.inhabitantID] = self.repositories.inhabitants.find_by_id(order.inhabitantID)

                user = users[order.userID]
                inhabitant = inhabitants[order.inhabitantID]

                rows.append({
                    "_id": order.id,
                    "content": order.content,
                    "status": order.status,
                    "userName": display_name(user),
                    "userType": user.userType if user else UNKNOWN,
                    "inhabitantName": display_name(inhabitant),
                    "inhabitantCPF": inhabitant.cpf if inhabitant else UNKNOWN,
                    "date": format_date(order.date),
                    "date_update": format_date(order.date_update),
                })

            span.set_attribute("orders.count", len(rows))
            return rows

    def with_community(self, now: Optional[datetime] = None) -> List[Dict[str, str]]:
        """
        Current-year orders projected to ``{community, date}``.

        The community is reached through the order's inhabitant.
        """
        with tracer.start_as_current_span("orders.with_community") as span:
            year = (now or utcnow()).year
            start = datetime(year, 1, 1, tzinfo=timezone.utc)
            end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)

            inhabitants: Dict[str, Any] = {}
            names: Dict[str, str] = {}

            rows = []
            for order in self.repositories.orders.find_created_between(start, end):
                if order.date.year != year:
                    continue

                if order.inhabitantID not in inhabitants:
                    inhabitants[order.inhabitantID] = self.repositories.inhabitants.find_by_id(order.inhabitantID)

                rows.append({
                    "community": self.inhabitants.community_name(inhabitants[order.inhabitantID], names),
                    "date": format_date(order.date),
                })

            span.set_attributes({"orders.year": year, "orders.count": len(rows)})
            return rows
