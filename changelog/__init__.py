"""
Changelog package for detecting and formatting new release notes.

This package contains:
- Version entry parsing
- Snapshot diffing against the last observed document
- Chat message formatting
- Upstream fetching and snapshot caching
"""

__version__ = "1.0.0"
