"""Infrastructure Layer — database engine, logging, token and password handling.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All driver exceptions are mapped to core/errors.py types at this boundary
"""
