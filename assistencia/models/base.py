# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base entity model with identifier generation and document conversion.
"""

import uuid
from typing import Any, Dict, Type, TypeVar
from pydantic import BaseModel, Field, ConfigDict

E = TypeVar("E", bound="BaseEntity")


def generate_id() -> str:
    """Generate a new document identifier."""
    return str(uuid.uuid4())


class BaseEntity(BaseModel):
    """Base entity for every top-level record. Stored under ``_id``."""
    
    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Use enum values instead of enum objects
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        # Run enum defaults through use_enum_values too
        validate_default=True,
        # Stored documents may carry fields from older schema versions
        extra="ignore"
    )
    
    id: str = Field(default_factory=generate_id, alias="_id", description="Unique identifier")
    
    def to_document(self) -> Dict[str, Any]:
        """Serialize to the stored document shape."""
        return self.model_dump(by_alias=True)
    
    @classmethod
    def from_document(cls: Type[E], document: Dict[str, Any]) -> E:
        """Build an entity from a stored document."""
        return cls.model_validate(document)
    
    def to_response(self) -> Dict[str, Any]:
        """Serialize for API responses."""
        return self.model_dump(by_alias=True, mode="json")
