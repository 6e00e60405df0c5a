"""
BORA transfer feed.

Scans the Kaia ledger for BORA token transfers sent from the tracked wallet
and serves them as a cached JSON feed.
"""

__version__ = "0.1.0"
