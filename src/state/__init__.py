from .runtime import RuntimeDeps
from .session import SessionState
from .settings import AppSettings

__all__ = ["AppSettings", "RuntimeDeps", "SessionState"]
