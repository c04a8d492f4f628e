"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Every mutating route wraps its repository call in ActivityLogger.track()
"""
