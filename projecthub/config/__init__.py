from .security import SecurityConfig

__all__ = ["SecurityConfig"]
