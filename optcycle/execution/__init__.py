"""
Execution collaborator boundary.

The core only hands order intents to a sink; matching, fills and portfolio
accounting live on the other side of this interface.
"""
from .base import LoggingSink, OrderIntentSink, RecordingSink

__all__ = ["LoggingSink", "OrderIntentSink", "RecordingSink"]
