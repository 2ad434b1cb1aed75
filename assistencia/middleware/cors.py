# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
CORS middleware for browser clients of the caseworker panel.

Allowed origins come from the comma separated ``CORS`` environment variable;
``*`` allows any origin.
"""

from flask import Flask, Response, request, make_response
from typing import Iterable, List, Optional
import os
import logging

logger = logging.getLogger(__name__)

DEFAULT_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')
DEFAULT_HEADERS = ('Authorization', 'Content-Type')


def origins_from_env() -> List[str]:
    return [origin.strip() for origin in os.getenv('CORS', '').split(',') if origin.strip()]


class CORSMiddleware:
    """Answers preflight requests and decorates responses for allowed origins."""

    def __init__(
        self,
        app: Flask,
        allowed_origins: Optional[Iterable[str]] = None,
        allowed_methods: Iterable[str] = DEFAULT_METHODS,
        allowed_headers: Iterable[str] = DEFAULT_HEADERS,
        max_age: int = 86400  # 24 hours
    ):
        self.app = app
        self.allowed_origins = list(allowed_origins) if allowed_origins is not None else origins_from_env()
        self.headers = {
            'Access-Control-Allow-Methods': ', '.join(allowed_methods),
            'Access-Control-Allow-Headers': ', '.join(allowed_headers),
            'Access-Control-Max-Age': str(max_age),
            'Vary': 'Origin',
        }

        app.before_request(self._preflight)
        app.after_request(self._decorate)

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return False
        return '*' in self.allowed_origins or origin in self.allowed_origins

    def _apply(self, response: Response, origin: str) -> Response:
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers.update(self.headers)
        return response

    def _preflight(self):
        if request.method != 'OPTIONS':
            return None

        origin = request.headers.get('Origin')
        if not self.is_origin_allowed(origin):
            logger.warning("CORS preflight rejected", extra={"origin": origin})
            return make_response('', 403)

        return self._apply(make_response('', 204), origin)

    def _decorate(self, response: Response) -> Response:
        origin = request.headers.get('Origin')
        if self.is_origin_allowed(origin):
            self._apply(response, origin)
        elif origin:
            logger.debug("CORS headers withheld", extra={"origin": origin})
        return response


def configure_cors(app: Flask, **kwargs) -> CORSMiddleware:
    """Attach CORS handling to ``app``."""
    return CORSMiddleware(app, **kwargs)
