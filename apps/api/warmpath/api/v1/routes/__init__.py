"""Route package marker.

Keep this module import-light so worker code can import a single route
module without pulling in the whole API.
"""

__all__ = [
    "health",
    "paths",
]
