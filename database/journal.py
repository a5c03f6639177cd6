"""
Trade Journal
Write-only event sink for trades, signals and session summaries
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence

from core.models import Signal, TradeRecord


# Seconds between expiry sweeps of the store
PRUNE_INTERVAL = 3600


class TradeJournal:
    """Records bot events into a JSONManager or MongoManager store"""

    def __init__(self, store, logger, clock: Callable[[], float] = time.monotonic):
        self.store = store
        self.logger = logger
        self.clock = clock
        self._last_prune: Optional[float] = None

    def _write(self, collection: str, document: Dict[str, Any]) -> bool:
        written = self.store.insert_document(collection, document)
        if not written:
            self.logger.warning(f"Failed to write {collection} event")
        return written

    def record_trade(self, trade: TradeRecord) -> bool:
        return self._write('trades', trade.to_document())

    def record_signal(self, signal: Signal) -> bool:
        return self._write('signals', signal.to_document())

    def record_signals(self, signals: Sequence[Signal]) -> bool:
        """Write a whole scan's signals in one store call"""
        if not signals:
            return True
        written = self.store.insert_many('signals', [s.to_document() for s in signals])
        if not written:
            self.logger.warning(f"Failed to write {len(signals)} signal events")
        return written

    def record_session(self, session_stats: Dict[str, Any]) -> bool:
        document = dict(session_stats)
        document['recorded_at'] = datetime.now(timezone.utc)
        return self._write('sessions', document)

    def log_event(self, level: str, message: str, **metadata) -> bool:
        return self._write('system_logs', {
            'level': level,
            'message': message,
            'metadata': metadata,
        })

    def prune_expired(self, min_interval: float = PRUNE_INTERVAL) -> int:
        """
        Drop expired documents, at most once per min_interval seconds

        Returns:
            Number of documents removed (0 when the sweep was skipped)
        """
        now = self.clock()
        if self._last_prune is not None and now - self._last_prune < min_interval:
            return 0
        self._last_prune = now
        return self.store.cleanup_expired_documents()
