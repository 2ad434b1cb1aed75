# SPDX-License-Identifier: Apache-2.0

"""
Inhabitant (beneficiary) endpoints.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from pydantic import BaseModel, Field

from ..middleware.auth import require_auth
from . import API_PREFIX, json_body

inhabitants_tag = Tag(name="Inhabitants", description="Beneficiary registry")
inhabitants_bp = APIBlueprint(
    'inhabitants',
    __name__,
    url_prefix=API_PREFIX,
    abp_tags=[inhabitants_tag]
)


class InhabitantCpfPath(BaseModel):
    cpf: str = Field(..., description="CPF, with or without punctuation")


class InhabitantPath(BaseModel):
    inhabitant_id: str = Field(..., description="Inhabitant id")


@inhabitants_bp.post('/inhabitant')
@require_auth
def create_inhabitant():
    inhabitant = current_app.inhabitant_service.create(json_body())
    return jsonify({
        "inhabitant": inhabitant.to_response(),
        "message": "Inhabitant created successfully"
    }), 201


@inhabitants_bp.get('/inhabitant')
@require_auth
def list_inhabitants():
    """List inhabitants with their community name attached."""
    return jsonify(current_app.inhabitant_service.list_with_community()), 200


@inhabitants_bp.get('/inhabitant/<string:cpf>')
@require_auth
def get_inhabitant_by_cpf(path: InhabitantCpfPath):
    inhabitant = current_app.inhabitant_service.get_by_cpf(path.cpf)
    return jsonify(inhabitant.to_response()), 200


@inhabitants_bp.put('/inhabitant/<string:inhabitant_id>')
@require_auth
def update_inhabitant(path: InhabitantPath):
    inhabitant = current_app.inhabitant_service.update(
        path.inhabitant_id,
        json_body()
    )
    return jsonify({
        "inhabitant": inhabitant.to_response(),
        "message": "Inhabitant updated successfully"
    }), 200


@inhabitants_bp.delete('/inhabitant/<string:inhabitant_id>')
@require_auth
def delete_inhabitant(path: InhabitantPath):
    current_app.inhabitant_service.delete(path.inhabitant_id)
    return jsonify({"message": "Inhabitant deleted successfully"}), 200
