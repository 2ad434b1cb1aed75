# SPDX-License-Identifier: Apache-2.0

"""
Service order endpoints and reports.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from pydantic import BaseModel, Field

from ..middleware.auth import require_auth
from . import API_PREFIX, json_body

orders_tag = Tag(name="Orders", description="Service orders and reports")
orders_bp = APIBlueprint(
    'orders',
    __name__,
    url_prefix=API_PREFIX,
    abp_tags=[orders_tag]
)


class OrderPath(BaseModel):
    order_id: str = Field(..., description="Order id")


@orders_bp.post('/order')
@require_auth
def create_order():
    """
    File an order for an inhabitant.

    The beneficiary is given as ``inhabitantID`` or ``inhabitantCPF``.
    """
    order = current_app.order_service.create(json_body())
    return jsonify(order.to_response()), 201


@orders_bp.get('/order')
@require_auth
def list_orders():
    orders = current_app.order_service.list()
    return jsonify([order.to_response() for order in orders]), 200


@orders_bp.get('/order/data/view')
@require_auth
def orders_processed_view():
    """Orders joined with user and inhabitant names, dates as DD/MM/YYYY."""
    return jsonify(current_app.order_service.processed_view()), 200


@orders_bp.get('/order/with/community')
@require_auth
def orders_with_community():
    """Current-year orders as ``{community, date}`` pairs."""
    return jsonify(current_app.order_service.with_community()), 200


@orders_bp.get('/order/<string:order_id>')
@require_auth
def get_order(path: OrderPath):
    order = current_app.order_service.get(path.order_id)
    return jsonify(order.to_response()), 200


@orders_bp.put('/order/<string:order_id>')
@require_auth
def update_order(path: OrderPath):
    order = current_app.order_service.update(path.order_id, json_body())
    return jsonify({"message": "Order updated successfully", "order": order.to_response()}), 200


@orders_bp.delete('/order/<string:order_id>')
@require_auth
def delete_order(path: OrderPath):
    deleted_id = current_app.order_service.delete(path.order_id)
    return jsonify({"message": "Order deleted successfully", "order": deleted_id}), 200
