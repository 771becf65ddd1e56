from .auth import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_current_user_optional,
    token_header,
)

__all__ = [
    "CurrentUser",
    "OptionalUser",
    "get_current_user",
    "get_current_user_optional",
    "token_header",
]
