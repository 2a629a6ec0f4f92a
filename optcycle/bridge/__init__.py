"""
Numeric runtime bridge.

Serializes calls into a numeric runtime (numpy by default) behind one
process-wide lock and converts results back to Decimal.
"""
from .runtime import RUNTIME_LOCK, CrossRuntimeBridge, compute_sin, is_runtime_locked

__all__ = ["RUNTIME_LOCK", "CrossRuntimeBridge", "compute_sin", "is_runtime_locked"]
