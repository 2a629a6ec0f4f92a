"""
optcycle - Option Leg Selection and Position Lifecycle Core

Selects option contracts from a chain, drives the flat/engaged position
lifecycle from discrete market snapshots, and exposes a serialized bridge
into a numeric runtime for auxiliary calculations.
"""

__version__ = "0.1.0"
__author__ = "optcycle Team"
