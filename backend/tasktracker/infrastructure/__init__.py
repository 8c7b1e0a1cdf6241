"""Infrastructure — database session manager, key-value maps, logging setup.

Invariants:
    - Only this layer (and api/) touches SQLAlchemy engines and sessions
"""
