"""
Database Module
Journal storage backends (JSON files or MongoDB)
"""

from .json_manager import JSONManager
from .journal import TradeJournal


def create_store(config, logger):
    """
    Build the storage backend named by STORAGE_BACKEND

    MongoDB falls back to JSON storage when the server is unreachable.
    """
    if config.STORAGE_BACKEND == 'mongodb':
        from .mongo_manager import MongoManager

        store = MongoManager(config, logger)
        if store.is_connected:
            return store
        logger.warning("MongoDB connection failed, falling back to JSON storage")

    return JSONManager(config, logger)


__all__ = ['JSONManager', 'TradeJournal', 'create_store']
