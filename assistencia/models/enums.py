# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the social-assistance platform.
"""

from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """Caseworker categories."""
    BF = "Bolsa Família"
    CRAS = "Centro de Referência de Assistência Social"
    DEFAULT = "None"


class OrderStatus(str, Enum):
    """Service order workflow status. Any status may follow any other."""
    PENDING = "Pending"
    REJECTED = "Rejected"
    ATTENDED = "Attended"

    @classmethod
    def parse(cls, value) -> Optional["OrderStatus"]:
        """
        Resolve user input to a status.

        Accepts the canonical value ("Pending"), the member name in any case
        ("PENDING") and the legacy Portuguese values stored by older clients.
        Returns None for anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None

        text = value.strip()
        for status in cls:
            if text == status.value or text.upper() == status.name:
                return status

        return _LEGACY_STATUS_VALUES.get(text.lower())


_LEGACY_STATUS_VALUES = {
    "pendente": OrderStatus.PENDING,
    "negado": OrderStatus.REJECTED,
    "atendido": OrderStatus.ATTENDED,
}
