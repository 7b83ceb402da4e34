"""Toolkit for querying a GraphQL content graph."""

__version__ = "0.1.0"
