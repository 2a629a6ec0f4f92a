"""
Contract selection module.

Filters a contract chain by right and exact strike, preferring the earliest
expiry, and caches selections for the lifetime of a run.
"""
from .filter import ContractSelector, select_contract

__all__ = ["ContractSelector", "select_contract"]
