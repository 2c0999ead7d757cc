"""
Test suite for commission-engine

Contains:
- tests/unit/          : Unit tests for money primitives, allocation, engine and contracts
"""
