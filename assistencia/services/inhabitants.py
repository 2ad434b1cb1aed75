# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Inhabitant workflows.

Every write goes through the same steps: sanitize the CPF, check required
fields, validate constraints, check the community reference and CPF
uniqueness, then persist.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from opentelemetry import trace

from ..domain.cpf import sanitize_cpf
from ..domain.formatting import UNKNOWN, display_name
from ..domain.validation import validate_inhabitant
from ..middleware.error_handler import (
    NotFoundException,
    PreconditionFailedException,
    ValidationException
)
from ..models.entities import Address, Inhabitant
from .integrity import IntegrityService
from .repositories import Repositories

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Name, CPF and address are required"


def normalize_inhabitant_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build an inhabitant candidate from request input.

    The CPF is stripped of punctuation here, before the presence check and
    the checksum, so ``123.456.789-09`` is accepted as ``12345678909``.
    """
    name = payload.get("name")
    cpf = payload.get("cpf")
    address = payload.get("address")

    if isinstance(address, Mapping):
        number = address.get("number")
        street = address.get("street")
        address = {
            "street": street.strip() if isinstance(street, str) else street,
            # House numbers are often sent as JSON numbers
            "number": str(number) if isinstance(number, int) and not isinstance(number, bool) else number,
        }

    return {
        "name": name.strip() if isinstance(name, str) else name,
        "cpf": sanitize_cpf(cpf) if isinstance(cpf, (str, int)) else cpf,
        "numberPhone": payload.get("numberPhone"),
        "address": address,
        "communityID": payload.get("communityID") or None,
    }


def _has_required_fields(candidate: Mapping[str, Any]) -> bool:
    address = candidate.get("address")
    if not isinstance(address, Mapping):
        return False
    return all([candidate.get("name"), candidate.get("cpf"), address.get("street"), address.get("number")])


class InhabitantService:
    """Orchestrates inhabitant writes, lookups and the community join."""

    def __init__(self, repositories: Repositories, integrity: IntegrityService):
        self.repositories = repositories
        self.integrity = integrity

    def _prepare(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        candidate = normalize_inhabitant_payload(payload)

        if not _has_required_fields(candidate):
            raise PreconditionFailedException(REQUIRED_FIELDS_MESSAGE)

        violations = validate_inhabitant(candidate)
        if violations:
            raise ValidationException("Invalid inhabitant", violations)

        return candidate

    def create(self, payload: Mapping[str, Any]) -> Inhabitant:
        """
        Register an inhabitant.

        Raises:
            PreconditionFailedException: name, CPF or address missing
            ValidationException: constraint violations
            ReferenceNotFoundException: communityID does not exist
            DuplicateValueException: CPF already registered
        """
        with tracer.start_as_current_span("inhabitants.create") as span:
            candidate = self._prepare(payload)

            if candidate["communityID"]:
                self.integrity.require_community(candidate["communityID"])
            self.integrity.ensure_unique_cpf(candidate["cpf"])

            inhabitant = Inhabitant(
                name=candidate["name"],
                cpf=candidate["cpf"],
                numberPhone=candidate["numberPhone"],
                address=Address(**candidate["address"]),
                communityID=candidate["communityID"],
            )
            self.repositories.inhabitants.insert(inhabitant)

            span.set_attribute("inhabitant.id", inhabitant.id)
            logger.info("Inhabitant created", extra={"inhabitant_id": inhabitant.id})
            return inhabitant

    def list_with_community(self) -> List[Dict[str, Any]]:
        """All inhabitants with the owning community's display name attached."""
        with tracer.start_as_current_span("inhabitants.list") as span:
            inhabitants = self.repositories.inhabitants.list()
            names: Dict[str, str] = {}

            rows = []
            for inhabitant in inhabitants:
                row = inhabitant.to_response()
                row["communityName"] = self.community_name(inhabitant, names)
                rows.append(row)

            span.set_attribute("inhabitants.count", len(rows))
            return rows

    def community_name(self, inhabitant: Optional[Inhabitant], cache: Optional[Dict[str, str]] = None) -> str:
        """
        Resolve the community display name for one inhabitant.

        Falls back to the name embedded by older records, then to UNKNOWN
        when the reference is missing or dangling.
        """
        if inhabitant is None:
            return UNKNOWN

        community_id = inhabitant.communityID
        if not community_id:
            return inhabitant.community_name_hint() or UNKNOWN

        if cache is not None and community_id in cache:
            return cache[community_id]

        name = display_name(self.repositories.communities.find_by_id(community_id))
        if cache is not None:
            cache[community_id] = name
        return name

    def get_by_cpf(self, cpf: str) -> Inhabitant:
        with tracer.start_as_current_span("inhabitants.get_by_cpf"):
            inhabitant = self.repositories.inhabitants.find_by_cpf(sanitize_cpf(cpf))
            if inhabitant is None:
                raise NotFoundException("Inhabitant not registered")
            return inhabitant

    def get(self, inhabitant_id: str) -> Inhabitant:
        inhabitant = self.repositories.inhabitants.find_by_id(inhabitant_id)
        if inhabitant is None:
            raise NotFoundException("Inhabitant not registered")
        return inhabitant

    def update(self, inhabitant_id: str, payload: Mapping[str, Any]) -> Inhabitant:
        """Replace an inhabitant's fields, re-running every write check."""
        with tracer.start_as_current_span("inhabitants.update") as span:
            span.set_attribute("inhabitant.id", inhabitant_id)

            candidate = self._prepare(payload)
            inhabitant = self.get(inhabitant_id)

            if candidate["communityID"]:
                self.integrity.require_community(candidate["communityID"])
            self.integrity.ensure_unique_cpf(candidate["cpf"], exclude_id=inhabitant.id)

            legacy_community = None if candidate["communityID"] else inhabitant.community_name_hint()

            inhabitant.name = candidate["name"]
            inhabitant.cpf = candidate["cpf"]
            inhabitant.numberPhone = candidate["numberPhone"]
            inhabitant.address = Address(community=legacy_community, **candidate["address"])
            inhabitant.communityID = candidate["communityID"]

            self.repositories.inhabitants.update(inhabitant)

            logger.info("Inhabitant updated", extra={"inhabitant_id": inhabitant.id})
            return inhabitant

    def delete(self, inhabitant_id: str) -> None:
        with tracer.start_as_current_span("inhabitants.delete") as span:
            span.set_attribute("inhabitant.id", inhabitant_id)

            inhabitant = self.get(inhabitant_id)
            self.repositories.inhabitants.delete(inhabitant.id)

            logger.info("Inhabitant deleted", extra={"inhabitant_id": inhabitant.id})
