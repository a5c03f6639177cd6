"""
JSON File Storage Manager
Stores journal collections as JSON files with the same interface as MongoManager
"""

import json
import threading
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Any, Optional


COLLECTIONS = ('trades', 'signals', 'sessions', 'system_logs')


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, value in query.items():
        actual = document.get(key)
        if isinstance(value, dict):
            # Mongo-style range operators
            for op, op_value in value.items():
                if actual is None:
                    return False
                if op == '$gte' and actual < op_value:
                    return False
                if op == '$lte' and actual > op_value:
                    return False
                if op == '$in' and actual not in op_value:
                    return False
        elif actual != value:
            return False
    return True


class JSONManager:
    """
    JSON file-based storage manager
    One file per collection under DATA_DIRECTORY
    """

    def __init__(self, config, logger=None):
        self.config = config
        self.logger = logger
        self.data_dir = Path(getattr(config, 'DATA_DIRECTORY', './data'))
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.retention_days = getattr(config, 'MONGODB_RETENTION_DAYS', 0)
        self._lock = threading.Lock()

        # Always connected (local files)
        self.is_connected = True
        self._report(f"JSON storage initialized at {self.data_dir}")

    def _report(self, message: str, error: bool = False):
        if self.logger is None:
            return
        if error:
            self.logger.error(message)
        else:
            self.logger.debug(message)

    def _get_file_path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _load_collection(self, collection: str) -> List[Dict]:
        file_path = self._get_file_path(collection)
        if not file_path.exists():
            return []

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._report(f"Corrupt collection file {file_path}: {e}", error=True)
            return []
        return data if isinstance(data, list) else []

    def _save_collection(self, collection: str, documents: List[Dict]):
        file_path = self._get_file_path(collection)
        tmp_path = file_path.with_suffix('.tmp')

        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(documents, f, indent=2, default=str, ensure_ascii=False)
        tmp_path.replace(file_path)

    def _prepare(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        prepared = dict(document)
        prepared['_id'] = str(uuid.uuid4())
        prepared.setdefault('timestamp', now)
        if self.retention_days > 0:
            prepared['expires_at'] = now + timedelta(days=self.retention_days)
        return prepared

    def insert_document(self, collection: str, document: Dict[str, Any]) -> bool:
        return self.insert_many(collection, [document])

    def insert_many(self, collection: str, documents: List[Dict[str, Any]]) -> bool:
        if not self.is_connected:
            return False

        try:
            with self._lock:
                existing = self._load_collection(collection)
                existing.extend(self._prepare(doc) for doc in documents)
                self._save_collection(collection, existing)
            return True
        except OSError as e:
            self._report(f"JSON insert error ({collection}): {e}", error=True)
            return False

    def find_documents(self, collection: str, query: Optional[Dict] = None, limit: int = 100) -> List[Dict]:
        """Find documents; a limit of 0 returns every match"""
        if not self.is_connected:
            return []

        with self._lock:
            documents = self._load_collection(collection)

        if query:
            documents = [doc for doc in documents if _matches(doc, query)]

        return documents[:limit] if limit > 0 else documents

    def cleanup_expired_documents(self) -> int:
        """Remove expired documents; returns how many were dropped"""
        now = datetime.now(timezone.utc)
        removed = 0

        def expired(document: Dict[str, Any]) -> bool:
            if 'expires_at' not in document:
                return False
            expires_at = datetime.fromisoformat(str(document['expires_at']))
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            return expires_at <= now

        with self._lock:
            for collection in COLLECTIONS:
                documents = self._load_collection(collection)
                active = [doc for doc in documents if not expired(doc)]
                if len(active) != len(documents):
                    removed += len(documents) - len(active)
                    self._save_collection(collection, active)

        if removed:
            self._report(f"Cleaned up {removed} expired documents")
        return removed

    def clean_collection(self, collection: str):
        file_path = self._get_file_path(collection)
        if file_path.exists():
            file_path.unlink()

    def close(self):
        self.is_connected = False
