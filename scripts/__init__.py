"""Scripts package initialization.

Provides a namespace for executable helper modules (e.g., parse_query.py) so
tests can import them.
"""

from __future__ import annotations

__all__: list[str] = []
