# SPDX-License-Identifier: Apache-2.0

"""
Field constraint tables for User, Community, Inhabitant and Order.

Each entity is described by a tuple of ``FieldRule``s. A rule names a field
and the constraints its value must satisfy; ``validate`` evaluates every rule
independently and collects all failures, so a candidate with three bad fields
produces three violations. Nested objects (the inhabitant address) carry their
own rule table and report dotted property paths such as ``address.street``.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from ..models.enums import OrderStatus, UserRole
from .cpf import CPF_LENGTH, is_valid_cpf

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


@dataclass(frozen=True)
class Constraint:
    """A named predicate with the message reported when it fails."""
    name: str
    check: Callable[[Any], bool]
    message: str

    def describe(self, path: str) -> str:
        return self.message.format(field=path)


@dataclass(frozen=True)
class FieldRule:
    """Constraints for one field of a candidate object."""
    field: str
    constraints: Tuple[Constraint, ...] = ()
    optional: bool = False
    nested: Optional[Tuple["FieldRule", ...]] = None


@dataclass
class FieldViolation:
    """All failed constraints of one field."""
    property: str
    constraints: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"property": self.property, "constraints": dict(self.constraints)}


# Constraint builders

def is_string() -> Constraint:
    return Constraint("isString", lambda v: isinstance(v, str), "{field} must be a string")


def not_empty() -> Constraint:
    return Constraint(
        "isNotEmpty",
        lambda v: v is not None and (not isinstance(v, str) or v.strip() != ""),
        "{field} should not be empty"
    )


def length(min_len: int, max_len: int) -> Tuple[Constraint, ...]:
    """String length bounds. Non-strings are left to ``is_string``."""
    if min_len == max_len:
        return (
            is_string(),
            Constraint(
                "isLength",
                lambda v: not isinstance(v, str) or len(v) == min_len,
                "{field} must be exactly %d characters long" % min_len
            ),
        )

    return (
        is_string(),
        Constraint(
            "minLength",
            lambda v: not isinstance(v, str) or len(v) >= min_len,
            "{field} must be longer than or equal to %d characters" % min_len
        ),
        Constraint(
            "maxLength",
            lambda v: not isinstance(v, str) or len(v) <= max_len,
            "{field} must be shorter than or equal to %d characters" % max_len
        ),
    )


def is_email() -> Constraint:
    return Constraint(
        "isEmail",
        lambda v: isinstance(v, str) and EMAIL_PATTERN.match(v) is not None,
        "{field} must be an email"
    )


def is_enum(enum_cls: Type[Enum]) -> Constraint:
    allowed = [member.value for member in enum_cls]
    return Constraint(
        "isEnum",
        lambda v: isinstance(v, enum_cls) or v in allowed,
        "{field} must be one of the following values: " + ", ".join(allowed)
    )


def is_cpf() -> Constraint:
    return Constraint("isCpf", lambda v: isinstance(v, str) and is_valid_cpf(v), "Invalid CPF")


# Rule tables

USER_RULES = (
    FieldRule("name", length(5, 50)),
    FieldRule("email", (is_email(),)),
    FieldRule("password", length(6, 15)),
    FieldRule("userType", (is_enum(UserRole),)),
)

COMMUNITY_RULES = (
    FieldRule("name", (is_string(), not_empty())),
)

ADDRESS_RULES = (
    FieldRule("street", (not_empty(),) + length(3, 50)),
    FieldRule("number", (is_string(), not_empty())),
)

INHABITANT_RULES = (
    FieldRule("name", length(5, 50)),
    FieldRule("cpf", (not_empty(),) + length(CPF_LENGTH, CPF_LENGTH) + (is_cpf(),)),
    FieldRule("numberPhone", length(0, 14), optional=True),
    FieldRule("address", nested=ADDRESS_RULES),
    FieldRule("communityID", (is_string(), not_empty()), optional=True),
)

ORDER_RULES = (
    FieldRule("content", length(5, 255)),
    FieldRule("status", (is_enum(OrderStatus),)),
    FieldRule("userID", (is_string(), not_empty())),
    FieldRule("inhabitantID", (is_string(), not_empty())),
)


def _get(candidate: Any, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def _is_object(value: Any) -> bool:
    return value is not None and not isinstance(value, (str, bytes, int, float, bool, list, tuple))


def validate(
    candidate: Any,
    rules: Iterable[FieldRule],
    only: Optional[Iterable[str]] = None,
    prefix: str = ""
) -> List[FieldViolation]:
    """
    Evaluate a rule table against a candidate object.

    Args:
        candidate: Mapping or object exposing the fields as attributes
        rules: Rule table for the entity
        only: Restrict evaluation to these top-level fields
        prefix: Property path prefix used for nested objects

    Returns:
        One FieldViolation per failing field, in rule order
    """
    selected = set(only) if only is not None else None
    violations: List[FieldViolation] = []

    for rule in rules:
        if selected is not None and rule.field not in selected:
            continue

        path = prefix + rule.field
        value = _get(candidate, rule.field)

        if value is None and rule.optional:
            continue

        failed = {
            constraint.name: constraint.describe(path)
            for constraint in rule.constraints
            if not constraint.check(value)
        }
        if failed:
            violations.append(FieldViolation(path, failed))

        if rule.nested is not None:
            if _is_object(value):
                violations.extend(validate(value, rule.nested, prefix=path + "."))
            else:
                violations.append(FieldViolation(
                    path, {"nestedValidation": f"nested property {path} must be either object or array"}
                ))

    return violations


def validate_user(candidate: Any, only: Optional[Iterable[str]] = None) -> List[FieldViolation]:
    return validate(candidate, USER_RULES, only)


def validate_community(candidate: Any, only: Optional[Iterable[str]] = None) -> List[FieldViolation]:
    return validate(candidate, COMMUNITY_RULES, only)


def validate_inhabitant(candidate: Any, only: Optional[Iterable[str]] = None) -> List[FieldViolation]:
    return validate(candidate, INHABITANT_RULES, only)


def validate_order(candidate: Any, only: Optional[Iterable[str]] = None) -> List[FieldViolation]:
    return validate(candidate, ORDER_RULES, only)
