"""Services Layer — transfer engine and maintenance runner.

Invariants:
    - Services orchestrate IO around pure core checks
    - Collaborators injected through constructors (no module singletons)
"""
