"""Resolve the composite host route segment into connection parameters.

The serving layer only exposes one free-form path segment for provider
configuration, so the NEMO host, mission and credentials arrive packed into
a single whitespace-separated token, e.g.::

    nemo.example.com my-mission jdoe s3cret
"""

from enum import Enum
from typing import List, Optional, Sequence

from ..models import ConnectionSpec

HOST_TOKEN_LAYOUT = "<host> <mission> <username> <password>"
EXAMPLE_HOST_TOKEN = "nemo.example.com my-mission jdoe s3cret"

# Slot order inside the host token
REQUIRED_FIELDS = ("Host", "Mission", "Username", "Password")


class ParameterErrorKind(str, Enum):
    MISSING_PARAM = "MissingParam"
    EXCESS_PARAM = "ExcessParam"


class ParameterError(Exception):
    """Raised when the host token or form id cannot be resolved.

    The message always ends with the expected layout and a worked example so
    operators can fix the route without reading the code.
    """

    def __init__(
        self,
        kind: ParameterErrorKind,
        field: Optional[str] = None,
        extra: Optional[Sequence[str]] = None,
    ):
        self.kind = kind
        self.field = field
        self.extra: List[str] = list(extra or [])
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.kind == ParameterErrorKind.MISSING_PARAM:
            problem = f"Missing {self.field} parameter."
        else:
            problem = f"Unexpected extra parameters: {' '.join(self.extra)}."
        return (
            f"{problem} Expected '{HOST_TOKEN_LAYOUT}', "
            f"for example '{EXAMPLE_HOST_TOKEN}'"
        )


def resolve(host_token: str, form_id: str) -> ConnectionSpec:
    """Split ``host_token`` into its four slots and pair it with ``form_id``.

    Slots are checked in order and the first missing one is reported. Extra
    tokens are only reported once all four slots are filled.
    """
    tokens = (host_token or "").split()

    for position, field in enumerate(REQUIRED_FIELDS):
        if len(tokens) <= position:
            raise ParameterError(ParameterErrorKind.MISSING_PARAM, field=field)

    if len(tokens) > len(REQUIRED_FIELDS):
        raise ParameterError(
            ParameterErrorKind.EXCESS_PARAM,
            extra=tokens[len(REQUIRED_FIELDS):],
        )

    if not form_id or not form_id.strip():
        raise ParameterError(ParameterErrorKind.MISSING_PARAM, field="Id")

    host, mission, username, password = tokens
    return ConnectionSpec(
        host=host,
        mission=mission,
        username=username,
        password=password,
        form_id=form_id.strip(),
    )
