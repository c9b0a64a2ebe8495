"""
AgriBot farmer-advisory conversational backend.

Import from subpackages; only the version is exported here.
"""

__version__ = "0.1.0"
