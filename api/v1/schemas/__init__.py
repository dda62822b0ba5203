"""Re-export individual schema modules for easy imports."""

from .auth import ErrorOut, LoginIn, LoginOut, LoginResultOut, MessageOut, RegisterIn

__all__ = [
    "RegisterIn",
    "LoginIn",
    "MessageOut",
    "ErrorOut",
    "LoginResultOut",
    "LoginOut",
]
