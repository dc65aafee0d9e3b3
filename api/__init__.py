"""
REST API for J-Quants screening data.

Exposes the screening snapshot, the Prime listing and daily quotes over HTTP
for the dashboard front end.
"""

__version__ = "1.0.0"
