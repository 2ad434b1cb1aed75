# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains the authentication decorator, CORS handling and the
error handlers that turn application exceptions into JSON responses.
"""
