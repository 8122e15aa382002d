from .host import (
    EXAMPLE_HOST_TOKEN,
    HOST_TOKEN_LAYOUT,
    ParameterError,
    ParameterErrorKind,
    resolve,
)

__all__ = [
    "EXAMPLE_HOST_TOKEN",
    "HOST_TOKEN_LAYOUT",
    "ParameterError",
    "ParameterErrorKind",
    "resolve",
]
