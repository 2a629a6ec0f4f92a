"""
Market data and domain value types.

Symbols, option contracts and chains, market snapshots, position views and
order intents, plus the contract chain provider interface the engine uses
during setup.
"""
