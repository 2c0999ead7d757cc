"""
Core money primitives, domain models, and contracts.

This module contains the foundational building blocks of the commission
engine that are independent of external systems (HTTP, databases, etc.).
"""
