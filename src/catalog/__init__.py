"""
Package Catalog backend
GraphQL service for owned, expiring package records
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
