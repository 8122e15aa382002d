from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict

DEFAULT_TTL = 10
DEFAULT_METADATA_NAME = "NEMO"
DEFAULT_ID_FIELD = "ResponseID"
DEFAULT_USER_AGENT = "nemo-provider"

# A single survey response as returned by the OData feed. The attribute set
# differs per form, so no schema is imposed.
RawRecord = Dict[str, Any]


class ConnectionSpec(BaseModel):
    """Everything needed to reach one form's responses on a NEMO host."""

    model_config = ConfigDict(frozen=True)

    host: str
    mission: str
    username: str
    password: str = Field(repr=False)
    form_id: str


class FetchOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    headers: Dict[str, str] = Field(default_factory=dict, repr=False)


class RouteParams(BaseModel):
    """Path parameters handed over by the serving layer.

    ``host`` is the composite ``<host> <mission> <username> <password>``
    token and ``id`` is the form identifier.
    """

    host: str = ""
    id: str = ""
    layer: Optional[str] = None
    method: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("host", "id", mode="before")
    @classmethod
    def blank_if_missing(cls, value: Optional[str]) -> str:
        # Optional route segments arrive as None
        if value is None:
            return ""
        return value


class ProviderRequest(BaseModel):
    params: RouteParams = Field(default_factory=RouteParams)
    query: Dict[str, Any] = Field(default_factory=dict)


class ProviderConfig(BaseModel):
    """Options supplied to the provider at construction time.

    Every key is optional:

    - ``timeout``: seconds allowed for the upstream GET, ``None`` waits forever
    - ``ttl``: cache hint copied onto every feature collection
    - ``metadata_name`` / ``id_field``: values for the collection ``metadata``
    - ``user_agent``: outbound ``User-Agent`` header
    """

    model_config = ConfigDict(frozen=True)

    timeout: Optional[float] = 30.0
    ttl: int = DEFAULT_TTL
    metadata_name: str = DEFAULT_METADATA_NAME
    id_field: str = DEFAULT_ID_FIELD
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, value: int) -> int:
        if value < 0:
            raise ValueError("ttl must be non-negative")
        return value


class CollectionMetadata(BaseModel):
    name: str = DEFAULT_METADATA_NAME
    idField: str = DEFAULT_ID_FIELD
