# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Assistência Social API - Flask application factory

Builds the Flask application with OpenAPI 3.0 support, wires the persistence
gateways and entity services, and registers middleware and routes for the
municipal social-assistance registry.
"""

import os
from datetime import datetime, timezone
from typing import Optional
from flask import jsonify
from flask_openapi3 import OpenAPI, Info

from .observability.config import setup_observability
from .observability.middleware import add_observability_middleware
from .middleware.cors import configure_cors
from .middleware.error_handler import ErrorHandlerMiddleware
from .middleware.auth import AuthMiddleware
from .services.mongodb import MongoDBService
from .services.repositories import Repositories
from .services.integrity import IntegrityService
from .services.auth import AuthService
from .services.communities import CommunityService
from .services.inhabitants import InhabitantService
from .services.orders import OrderService
from .services.users import UserService
from .routes import API_PREFIX
from . import __version__

GREETING = {"message": "Hello, world!"}

# OpenAPI info
info = Info(
    title="Assistência Social API",
    version=__version__,
    description="Registry of caseworkers, communities, inhabitants and service orders"
)


def create_app(mongodb_service: Optional[MongoDBService] = None,
               auth_service: Optional[AuthService] = None) -> OpenAPI:
    """
    Create and configure the application.

    Args:
        mongodb_service: Store service; built from the environment when omitted
        auth_service: Token and password service; built from the environment when omitted
    """
    # Initialize observability first
    setup_observability()

    # Tags come from each blueprint's abp_tags
    app = OpenAPI(__name__, info=info)

    # Add observability middleware
    add_observability_middleware(app)

    # Environment configuration
    app.config['ENVIRONMENT'] = os.getenv('ENVIRONMENT', 'development')
    app.config['DEBUG'] = app.config['ENVIRONMENT'] == 'development'
    app.config['API_PREFIX'] = API_PREFIX

    # Initialize services
    mongodb_service = mongodb_service or MongoDBService()
    auth_service = auth_service or AuthService()

    repositories = Repositories(mongodb_service)
    integrity = IntegrityService(repositories)
    inhabitant_service = InhabitantService(repositories, integrity)

    # Initialize middleware
    ErrorHandlerMiddleware(app)
    configure_cors(app)

    # Make services available to routes
    app.mongodb_service = mongodb_service
    app.auth_service = auth_service
    app.auth_middleware = AuthMiddleware(auth_service)
    app.user_service = UserService(repositories, integrity, auth_service)
    app.community_service = CommunityService(repositories, integrity)
    app.inhabitant_service = inhabitant_service
    app.order_service = OrderService(repositories, integrity, inhabitant_service)

    # Register routes
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.communities import communities_bp
    from .routes.inhabitants import inhabitants_bp
    from .routes.orders import orders_bp

    app.register_api(auth_bp)
    app.register_api(users_bp)
    app.register_api(communities_bp)
    app.register_api(inhabitants_bp)
    app.register_api(orders_bp)

    @app.route(f'{API_PREFIX}/healthz')
    def health_check():
        """Store connectivity check."""
        mongodb_health = app.mongodb_service.health_check()
        healthy = mongodb_health['status'] == 'healthy'

        health_data = {
            "status": "healthy" if healthy else "unhealthy",
            "service": "assistencia-social-api",
            "version": __version__,
            "environment": app.config['ENVIRONMENT'],
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "dependencies": {"mongodb": mongodb_health}
        }
        return jsonify(health_data), 200 if healthy else 503

    # Unmatched paths and methods get the greeting instead of a 404
    all_methods = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']

    @app.route('/', defaults={'subpath': ''}, methods=all_methods)
    @app.route('/<path:subpath>', methods=all_methods)
    def greeting(subpath: str = ''):
        return jsonify(GREETING), 200

    return app


if __name__ == '__main__':
    # Development server
    application = create_app()
    application.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 3030)),
        debug=application.config['DEBUG']
    )
