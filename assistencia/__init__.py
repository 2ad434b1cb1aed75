# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Assistência Social API - record keeping for municipal social assistance.
"""

__version__ = "1.0.0"
