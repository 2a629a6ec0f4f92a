"""
Position lifecycle module.

Drives the FLAT -> ENGAGED -> FLAT loop from market snapshots and confirmed
positions, emitting order intents on each engagement.
"""
