"""
Data quality error classifications for market snapshot processing.

These exceptions describe snapshots the controller cannot use. They are
handled by skipping the snapshot, never by aborting the run.
"""

from datetime import datetime
from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TemporalDataError(DataQualityError):
    """Snapshot delivered out of timestamp order."""

    def __init__(self, message: str, timestamp: Optional[datetime] = None,
                 previous_timestamp: Optional[datetime] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.previous_timestamp = previous_timestamp

