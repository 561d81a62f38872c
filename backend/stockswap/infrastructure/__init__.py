"""Infrastructure Layer — JSON persistence, simulated external systems, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - File and external-system failures mapped to core/errors.py types

Design Decisions:
    - Concrete implementations of the Protocols in core/repository_protocols.py
"""
