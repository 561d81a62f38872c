"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate shape at the system boundary
    - Business preconditions stay in core/enforce_transfer.py
"""
