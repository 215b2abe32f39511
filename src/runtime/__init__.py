"""Runtime package.

Keep this module dependency-light: importing `src.runtime.*` in unit tests
should not start a server or touch the staging root.
"""

__all__: list[str] = []
