"""Services Layer — tenant-scoped repositories, assignments, activity logging.

Invariants:
    - Every non-admin read/write carries the resolved tenant id
    - Repositories raise core/errors.py types only; HTTP mapping happens in api/
    - Each repository is bound to one AsyncSession (one request, one transaction)
"""
