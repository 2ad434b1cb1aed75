# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB service layer with connection pooling and collection helpers.
"""

import os
import logging
from typing import List, Dict, Optional, Any
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConnectionFailure,
    ServerSelectionTimeoutError,
    DuplicateKeyError
)

from ..middleware.error_handler import DuplicateValueException

logger = logging.getLogger(__name__)


class MongoDBService:
    """MongoDB service with connection pooling and single-document CRUD."""

    def __init__(self, connection_string: str = None, database_name: str = None,
                 database: Optional[Database] = None):
        """
        Initialize MongoDB service with connection pooling.

        Args:
            connection_string: MongoDB URI
            database_name: Database to use
            database: Pre-built database handle; skips client creation
        """
        self.connection_string = connection_string or os.getenv(
            'MONGODB_URI',
            'mongodb://localhost:27017/assistencia_dev'
        )
        self.database_name = database_name or os.getenv('MONGODB_DATABASE', 'assistencia_dev')
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = database

        # Connection pool settings
        self.max_pool_size = int(os.getenv('MONGODB_MAX_POOL_SIZE', '10'))
        self.min_pool_size = int(os.getenv('MONGODB_MIN_POOL_SIZE', '1'))
        self.max_idle_time_ms = int(os.getenv('MONGODB_MAX_IDLE_TIME_MS', '30000'))
        self.server_selection_timeout_ms = int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))

        logger.info(f"MongoDB service initialized for database: {self.database_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client with connection pooling."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    maxPoolSize=self.max_pool_size,
                    minPoolSize=self.min_pool_size,
                    maxIdleTimeMS=self.max_idle_time_ms,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    retryWrites=True,
                    retryReads=True
                )
                # Test connection
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise

        return self._client

    @property
    def database(self) -> Database:
        """Get MongoDB database."""
        if self._database is None:
            self._database = self.client[self.database_name]
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """Get MongoDB collection."""
        return self.database[collection_name]

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    def health_check(self) -> Dict[str, Any]:
        """Check MongoDB connection health."""
        try:
            result = self.database.command('ping')

            return {
                'status': 'healthy',
                'ping': result.get('ok') == 1,
                'database': self.database_name,
                'connection_pool_size': self.max_pool_size
            }
        except Exception as e:
            logger.error(f"MongoDB health check failed: {e}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'database': self.database_name
            }

    # Single-document CRUD

    def insert(self, collection: str, document: Dict) -> str:
        """Insert a document and return its id."""
        try:
            result = self.get_collection(collection).insert_one(document)
            logger.info(f"Created document in {collection}: {result.inserted_id}")
            return str(result.inserted_id)

        except DuplicateKeyError as e:
            logger.error(f"Duplicate key error in {collection}: {e}")
            raise DuplicateValueException("Document with this identifier already exists")
        except Exception as e:
            logger.error(f"Failed to create document in {collection}: {e}")
            raise

    def find_one(self, collection: str, query: Dict) -> Optional[Dict]:
        """Find a single document matching the query."""
        try:
            document = self.get_collection(collection).find_one(query)
            logger.debug(f"find_one in {collection} {query}: {'hit' if document else 'miss'}")
            return document

        except Exception as e:
            logger.error(f"Failed to find document in {collection}: {e}")
            raise

    def find(self, collection: str, query: Dict = None, sort_by: str = None,
             sort_order: int = ASCENDING) -> List[Dict]:
        """Find all documents matching the query."""
        try:
            cursor = self.get_collection(collection).find(query or {})
            if sort_by:
                cursor = cursor.sort(sort_by, sort_order)
            documents = list(cursor)

            logger.debug(f"Found {len(documents)} documents in {collection}")
            return documents

        except Exception as e:
            logger.error(f"Failed to find documents in {collection}: {e}")
            raise

    def update(self, collection: str, doc_id: str, updates: Dict) -> bool:
        """Set fields on a document by id."""
        try:
            result = self.get_collection(collection).update_one({"_id": doc_id}, {"$set": updates})

            if result.matched_count > 0:
                logger.info(f"Updated document {doc_id} in {collection}")
                return True
            else:
                logger.warning(f"No document updated for {doc_id} in {collection}")
                return False

        except DuplicateKeyError as e:
            logger.error(f"Duplicate key error in {collection}: {e}")
            raise DuplicateValueException("Document with this identifier already exists")
        except Exception as e:
            logger.error(f"Failed to update document {doc_id} in {collection}: {e}")
            raise

    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document by id."""
        try:
            result = self.get_collection(collection).delete_one({"_id": doc_id})

            if result.deleted_count > 0:
                logger.info(f"Deleted document {doc_id} in {collection}")
                return True
            else:
                logger.warning(f"No document deleted for {doc_id} in {collection}")
                return False

        except Exception as e:
            logger.error(f"Failed to delete document {doc_id} in {collection}: {e}")
            raise

    # Index Management

    def create_indexes(self) -> None:
        """
        Create lookup indexes for natural keys and report queries.

        Natural keys are deliberately not unique at the storage level;
        services check uniqueness before writing.
        """
        try:
            logger.info("Creating MongoDB indexes...")

            self.get_collection("users").create_index("email")
            self.get_collection("communities").create_index("name")

            inhabitants = self.get_collection("inhabitants")
            inhabitants.create_index("cpf")
            inhabitants.create_index("communityID")

            orders = self.get_collection("orders")
            orders.create_index([("date", DESCENDING)])
            orders.create_index([("userID", ASCENDING), ("date", DESCENDING)])
            orders.create_index("inhabitantID")

            logger.info("MongoDB indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise


# Singleton instance for application use
_mongodb_service: Optional[MongoDBService] = None


def get_mongodb_service() -> MongoDBService:
    """Get singleton MongoDB service instance."""
    global _mongodb_service
    if _mongodb_service is None:
        _mongodb_service = MongoDBService()
    return _mongodb_service


def close_mongodb_connection() -> None:
    """Close MongoDB connection (for cleanup)."""
    global _mongodb_service
    if _mongodb_service:
        _mongodb_service.close_connection()
        _mongodb_service = None
