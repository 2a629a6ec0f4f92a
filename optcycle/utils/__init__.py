"""
Utility functions module.

Time Semantics:
- Snapshot timestamps are ALWAYS authoritative and timezone-aware UTC
- Snapshots must arrive in non-decreasing timestamp order
"""
