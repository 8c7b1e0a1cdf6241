"""Task Tracker Package — caller-scoped task CRUD, comments, search and stats.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
