# SPDX-License-Identifier: Apache-2.0

"""
Authentication endpoints.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from . import API_PREFIX, json_body

auth_tag = Tag(name="Authentication", description="Password login")
auth_bp = APIBlueprint(
    'auth',
    __name__,
    url_prefix=f"{API_PREFIX}/auth",
    abp_tags=[auth_tag]
)


@auth_bp.post('/login')
def login():
    """
    Exchange email and password for a bearer token.

    Wrong email and wrong password produce the same 400 response.
    """
    user_data, token = current_app.user_service.authenticate(json_body())
    return jsonify({"userData": user_data, "token": token}), 200
