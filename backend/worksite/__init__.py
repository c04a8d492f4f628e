"""Worksite Management Backend — tenant-scoped workers, projects and activity log.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
