# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Cross-entity consistency checks.

The document store has no foreign keys or unique constraints on natural keys,
so services call these checks before every write. They are read-then-write:
two concurrent requests can both pass a uniqueness check and both insert.
"""

import logging
from typing import Optional

from opentelemetry import trace

from ..middleware.error_handler import (
    DuplicateValueException,
    HasDependentsException,
    ReferenceNotFoundException
)
from ..models.entities import Community, Inhabitant, User
from .repositories import Repositories

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class IntegrityService:
    """Existence, uniqueness and deletion-guard checks across collections."""

    def __init__(self, repositories: Repositories):
        self.repositories = repositories

    # Existence checks

    def require_user(self, user_id: str) -> User:
        """Resolve a userID reference or raise ReferenceNotFoundException."""
        user = self.repositories.users.find_by_id(user_id)
        if user is None:
            logger.info("Dangling user reference", extra={"user_id": user_id})
            raise ReferenceNotFoundException("User not found", reference="userID")
        return user

    def require_inhabitant(self, inhabitant_id: str) -> Inhabitant:
        """Resolve an inhabitantID reference or raise ReferenceNotFoundException."""
        inhabitant = self.repositories.inhabitants.find_by_id(inhabitant_id)
        if inhabitant is None:
            logger.info("Dangling inhabitant reference", extra={"inhabitant_id": inhabitant_id})
            raise ReferenceNotFoundException("Inhabitant not found", reference="inhabitantID")
        return inhabitant

    def require_inhabitant_by_cpf(self, cpf: str) -> Inhabitant:
        """Resolve an inhabitant by sanitized CPF or raise ReferenceNotFoundException."""
        inhabitant = self.repositories.inhabitants.find_by_cpf(cpf) if cpf else None
        if inhabitant is None:
            raise ReferenceNotFoundException("Inhabitant not found", reference="inhabitantCPF")
        return inhabitant

    def require_community(self, community_id: str) -> Community:
        """Resolve a communityID reference or raise ReferenceNotFoundException."""
        community = self.repositories.communities.find_by_id(community_id)
        if community is None:
            logger.info("Dangling community reference", extra={"community_id": community_id})
            raise ReferenceNotFoundException("Community not found", reference="communityID")
        return community

    # Uniqueness checks

    def ensure_unique_email(self, email: str, exclude_id: Optional[str] = None) -> None:
        holder = self.repositories.users.find_by_email(email)
        if holder is not None and holder.id != exclude_id:
            raise DuplicateValueException("Email already in use")

    def ensure_unique_cpf(self, cpf: str, exclude_id: Optional[str] = None) -> None:
        holder = self.repositories.inhabitants.find_by_cpf(cpf)
        if holder is not None and holder.id != exclude_id:
            raise DuplicateValueException("CPF already in use")

    def ensure_unique_community_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        holder = self.repositories.communities.find_by_name(name)
        if holder is not None and holder.id != exclude_id:
            raise DuplicateValueException("Community name already in use")

    # Deletion guard

    def ensure_community_unreferenced(self, community_id: str) -> None:
        """Refuse to delete a community while an inhabitant points at it."""
        with tracer.start_as_current_span("integrity.community_dependents") as span:
            dependent = self.repositories.inhabitants.find_by_community(community_id)
            span.set_attribute("integrity.has_dependents", dependent is not None)

            if dependent is not None:
                logger.info(
                    "Community deletion blocked by inhabitant",
                    extra={"community_id": community_id, "inhabitant_id": dependent.id}
                )
                raise HasDependentsException("There are inhabitants registered in this community")
