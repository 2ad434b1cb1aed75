# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the social-assistance API.

This package contains pure business rules with no side effects: national ID
checksums, field constraint tables and report formatting. Nothing here talks
to the document store.
"""
