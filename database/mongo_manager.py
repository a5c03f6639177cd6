"""
MongoDB Database Manager
Stores journal collections in MongoDB
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Any

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from .json_manager import COLLECTIONS


class MongoManager:
    """
    MongoDB connection and operations manager
    Expired documents are removed by a TTL index on expires_at
    """

    def __init__(self, config, logger=None):
        self.config = config
        self.logger = logger
        self.client: Optional[MongoClient] = None
        self.database = None
        self.is_connected = False
        self.retention_days = getattr(config, 'MONGODB_RETENTION_DAYS', 0)

        self._connect()

    def _report(self, message: str, error: bool = False):
        if self.logger is None:
            return
        if error:
            self.logger.error(message)
        else:
            self.logger.system(message)

    def _connect(self) -> bool:
        try:
            self.client = MongoClient(
                self._build_connection_string(),
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                socketTimeoutMS=5000,
                maxPoolSize=10
            )

            self.client.admin.command('ping')
            self.database = self.client[self.config.MONGODB_DATABASE]
            self.is_connected = True
            self._report(f"MongoDB connected to database: {self.config.MONGODB_DATABASE}")

            self._create_indexes()
            return True

        except PyMongoError as e:
            self._report(f"MongoDB connection failed: {e}", error=True)
            self.is_connected = False
            return False

    def _build_connection_string(self) -> str:
        host = self.config.MONGODB_HOST
        port = self.config.MONGODB_PORT
        database = self.config.MONGODB_DATABASE

        # Full connection strings (Atlas) are used as-is
        if host.startswith('mongodb+srv://') or host.startswith('mongodb://'):
            return host

        if self.config.MONGODB_USERNAME and self.config.MONGODB_PASSWORD:
            return f"mongodb://{self.config.MONGODB_USERNAME}:{self.config.MONGODB_PASSWORD}@{host}:{port}/{database}"
        return f"mongodb://{host}:{port}/{database}"

    def _create_indexes(self):
        try:
            self.database['trades'].create_index([
                ('timestamp', DESCENDING),
                ('venue', ASCENDING),
                ('symbol', ASCENDING)
            ])
            self.database['signals'].create_index([
                ('timestamp', DESCENDING),
                ('symbol', ASCENDING)
            ])
            self.database['sessions'].create_index([('session_date', DESCENDING)])
            self.database['system_logs'].create_index([
                ('timestamp', DESCENDING),
                ('level', ASCENDING)
            ])

            if self.retention_days > 0:
                for collection in COLLECTIONS:
                    self.database[collection].create_index('expires_at', expireAfterSeconds=0)

        except PyMongoError as e:
            self._report(f"Index creation failed: {e}", error=True)

    def _prepare(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        prepared = dict(document)
        prepared.setdefault('timestamp', now)
        if self.retention_days > 0:
            prepared['expires_at'] = now + timedelta(days=self.retention_days)
        return prepared

    def insert_document(self, collection: str, document: Dict[str, Any]) -> bool:
        if not self.is_connected:
            return False

        try:
            result = self.database[collection].insert_one(self._prepare(document))
            return result.acknowledged
        except PyMongoError as e:
            self._report(f"MongoDB insert error ({collection}): {e}", error=True)
            return False

    def insert_many(self, collection: str, documents: List[Dict[str, Any]]) -> bool:
        if not self.is_connected:
            return False

        try:
            result = self.database[collection].insert_many([self._prepare(d) for d in documents])
            return result.acknowledged
        except PyMongoError as e:
            self._report(f"MongoDB bulk insert error ({collection}): {e}", error=True)
            return False

    def find_documents(self, collection: str, query: Optional[Dict] = None, limit: int = 100) -> List[Dict]:
        if not self.is_connected:
            return []

        try:
            return list(self.database[collection].find(query or {}).limit(limit))
        except PyMongoError as e:
            self._report(f"MongoDB query error ({collection}): {e}", error=True)
            return []

    def cleanup_expired_documents(self) -> int:
        """Expiry is handled server-side by the TTL index"""
        return 0

    def close(self):
        if self.client:
            self.client.close()
        self.is_connected = False
