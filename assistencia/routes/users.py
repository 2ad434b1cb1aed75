# SPDX-License-Identifier: Apache-2.0

"""
User (caseworker) endpoints.

Signup is public; every other user route needs a bearer token.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from pydantic import BaseModel, Field
from ..middleware.auth import require_auth
from . import API_PREFIX, json_body

users_tag = Tag(name="Users", description="Caseworker accounts")
users_bp = APIBlueprint(
    'users',
    __name__,
    url_prefix=API_PREFIX,
    abp_tags=[users_tag]
)


class UserEmailPath(BaseModel):
    email: str = Field(..., description="User email")


class UserIdPath(BaseModel):
    user_id: str = Field(..., description="User id")


@users_bp.post('/user')
def create_user():
    """Sign up a new user."""
    user = current_app.user_service.create(json_body())
    return jsonify(user.to_response()), 201


@users_bp.get('/user')
@require_auth
def list_users():
    """List every user."""
    users = current_app.user_service.list()
    return jsonify([user.to_response() for user in users]), 200


@users_bp.get('/user/<string:email>')
@require_auth
def get_user_by_email(path: UserEmailPath):
    """Fetch a user by email."""
    user = current_app.user_service.get_by_email(path.email)
    return jsonify(user.to_response()), 200


@users_bp.patch('/user/<string:user_id>')
@require_auth
def update_user(path: UserIdPath):
    """Rename a user."""
    user = current_app.user_service.update(path.user_id, json_body())
    return jsonify({"message": "User updated successfully", "user": user.to_response()}), 200


@users_bp.delete('/user/<string:user_id>')
@require_auth
def delete_user(path: UserIdPath):
    """Delete a user."""
    deleted_id = current_app.user_service.delete(path.user_id)
    return jsonify(deleted_id), 200
