"""Identity record reconciliation engine.

Validates candidate identity records (SSID / NIN / full name) against a
source-of-truth dataset and reports a Valid / Partial Match / Invalid verdict
with a human-readable reason for every candidate.
"""

__version__ = "0.1.0"
