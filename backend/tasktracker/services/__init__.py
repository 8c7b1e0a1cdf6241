"""Services Layer — access layer, guarded task operations, and queries.

Invariants:
    - Only the access layer reads or writes the Task Store and User Index
    - Authorization is applied here, before any write

Design Decisions:
    - IO orchestration here, pure rules in core/ (impureim sandwich)
"""
