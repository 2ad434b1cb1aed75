# SPDX-License-Identifier: Apache-2.0

"""
Formatting helpers for report projections.
"""

from datetime import datetime
from typing import Optional, Union


def format_date(value: Optional[Union[datetime, str]]) -> Optional[str]:
    """Format a timestamp as DD/MM/YYYY. ISO strings are accepted."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value.strftime("%d/%m/%Y")


UNKNOWN = "Unknown"


def display_name(entity) -> str:
    """Name of a joined record, or the unknown sentinel when it is missing."""
    name = getattr(entity, "name", None)
    return name if name else UNKNOWN
