# SPDX-License-Identifier: Apache-2.0

"""
Community endpoints.
"""

from flask import request, jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from pydantic import BaseModel, Field

from ..middleware.auth import require_auth
from . import API_PREFIX, json_body

communities_tag = Tag(name="Communities", description="Community management")
communities_bp = APIBlueprint(
    'communities',
    __name__,
    url_prefix=API_PREFIX,
    abp_tags=[communities_tag]
)


class CommunityPath(BaseModel):
    community_id: str = Field(..., description="Community id")


@communities_bp.post('/community')
@require_auth
def create_community():
    community = current_app.community_service.create(json_body())
    return jsonify({
        "community": community.to_response(),
        "message": "Community created successfully"
    }), 201


@communities_bp.get('/community')
@require_auth
def list_communities():
    communities = current_app.community_service.list()
    return jsonify([community.to_response() for community in communities]), 200


@communities_bp.get('/community/query/name')
@require_auth
def get_community_by_name():
    """Find a community by exact name, from ``?name=`` or the JSON body."""
    name = request.args.get('name')
    if name is None:
        name = json_body().get('name')

    community = current_app.community_service.get_by_name(name)
    return jsonify(community.to_response()), 200


@communities_bp.get('/community/<string:community_id>')
@require_auth
def get_community(path: CommunityPath):
    community = current_app.community_service.get(path.community_id)
    return jsonify(community.to_response()), 200


@communities_bp.put('/community/<string:community_id>')
@require_auth
def update_community(path: CommunityPath):
    community = current_app.community_service.update(
        path.community_id,
        json_body()
    )
    return jsonify({
        "community": community.to_response(),
        "message": "Community updated successfully"
    }), 200


@communities_bp.delete('/community/<string:community_id>')
@require_auth
def delete_community(path: CommunityPath):
    current_app.community_service.delete(path.community_id)
    return jsonify({"message": "Community deleted successfully"}), 200
