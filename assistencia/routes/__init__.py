# SPDX-License-Identifier: Apache-2.0

"""
HTTP route blueprints.

Every resource blueprint is mounted under ``API_PREFIX``.
"""

import os
from typing import Any, Dict

from flask import request

API_PREFIX = os.getenv("API_PREFIX", "/v1")


def json_body() -> Dict[str, Any]:
    """Request JSON as a dict. Missing, malformed or non-object bodies read as empty."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
