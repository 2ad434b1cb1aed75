# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Community workflows: create, lookup, rename and guarded deletion.
"""

import logging
from typing import Any, List, Mapping

from opentelemetry import trace

from ..domain.validation import validate_community
from ..middleware.error_handler import (
    NotFoundException,
    PreconditionFailedException,
    ValidationException
)
from ..models.entities import Community
from .integrity import IntegrityService
from .repositories import Repositories

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


def _clean_name(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class CommunityService:
    """Orchestrates community writes and reads."""

    def __init__(self, repositories: Repositories, integrity: IntegrityService):
        self.repositories = repositories
        self.integrity = integrity

    def create(self, payload: Mapping[str, Any]) -> Community:
        """
        Create a community with a unique name.

        Raises:
            PreconditionFailedException: name missing
            ValidationException: name fails its constraints
            DuplicateValueException: another community has the name
        """
        with tracer.start_as_current_span("communities.create") as span:
            name = _clean_name(payload.get("name"))
            if not name:
                raise PreconditionFailedException("Name is required")

            violations = validate_community({"name": name})
            if violations:
                raise ValidationException("Invalid community", violations)

            self.integrity.ensure_unique_community_name(name)

            community = Community(name=name)
            self.repositories.communities.insert(community)

            span.set_attribute("community.id", community.id)
            logger.info("Community created", extra={"community_id": community.id})
            return community

    def list(self) -> List[Community]:
        with tracer.start_as_current_span("communities.list"):
            return self.repositories.communities.list()

    def get(self, community_id: str) -> Community:
        with tracer.start_as_current_span("communities.get") as span:
            span.set_attribute("community.id", community_id)
            community = self.repositories.communities.find_by_id(community_id)
            if community is None:
                raise NotFoundException("Community not found")
            return community

    def get_by_name(self, name: Any) -> Community:
        with tracer.start_as_current_span("communities.get_by_name"):
            name = _clean_name(name)
            if not name:
                raise PreconditionFailedException("Name is required")

            community = self.repositories.communities.find_by_name(name)
            if community is None:
                raise NotFoundException("Community not found")
            return community

    def update(self, community_id: str, payload: Mapping[str, Any]) -> Community:
        """Rename a community. Keeping its own current name is allowed."""
        with tracer.start_as_current_span("communities.update") as span:
            span.set_attribute("community.id", community_id)

            name = _clean_name(payload.get("name"))
            if not name:
                raise PreconditionFailedException("Name is required")

            community = self.get(community_id)

            violations = validate_community({"name": name})
            if violations:
                raise ValidationException("Invalid community", violations)

            self.integrity.ensure_unique_community_name(name, exclude_id=community.id)

            community.name = name
            self.repositories.communities.update(community)

            logger.info("Community updated", extra={"community_id": community.id})
            return community

    def delete(self, community_id: str) -> None:
        """Delete a community unless an inhabitant still references it."""
        with tracer.start_as_current_span("communities.delete") as span:
            span.set_attribute("community.id", community_id)

            community = self.get(community_id)
            self.integrity.ensure_community_unreferenced(community.id)
            self.repositories.communities.delete(community.id)

            logger.info("Community deleted", extra={"community_id": community.id})
