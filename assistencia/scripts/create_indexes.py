#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Create the lookup indexes used by natural-key checks and order reports.

Indexes are not unique: uniqueness of email, CPF and community name is
checked by the services before each write.
"""

import sys
import logging

from ..services.mongodb import get_mongodb_service, close_mongodb_connection

logger = logging.getLogger(__name__)


def main() -> int:
    """Create MongoDB indexes. Returns the process exit code."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        logger.info("Starting MongoDB index creation...")

        mongodb_service = get_mongodb_service()

        health = mongodb_service.health_check()
        if health['status'] != 'healthy':
            logger.error(f"MongoDB is not healthy: {health}")
            return 1

        logger.info(f"Connected to MongoDB database: {health['database']}")

        mongodb_service.create_indexes()

        logger.info("MongoDB indexes created successfully!")
        return 0

    except Exception as e:
        logger.error(f"Failed to create indexes: {e}")
        return 1
    finally:
        close_mongodb_connection()


if __name__ == "__main__":
    sys.exit(main())
