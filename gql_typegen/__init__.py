"""Typed Python client generator for GraphQL schemas."""

__version__ = "0.1.0"
