import os
from typing import Optional

from .model import Model
from .models import ProviderConfig, DEFAULT_TTL
from .utils.logging import setup_logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
NEMO_TIMEOUT_S = os.getenv("NEMO_TIMEOUT_S", "30")
NEMO_TTL = int(os.getenv("NEMO_TTL", str(DEFAULT_TTL)))


def _parse_timeout(value: str) -> Optional[float]:
    # "0" or "none" disables the timeout entirely
    if value.strip().lower() in ("", "0", "none"):
        return None
    return float(value)


def load_config() -> ProviderConfig:
    """Build a ProviderConfig from the process environment."""
    return ProviderConfig(timeout=_parse_timeout(NEMO_TIMEOUT_S), ttl=NEMO_TTL)


def create_model() -> Model:
    """Entry point for the serving layer: JSON logging plus an env-configured Model."""
    setup_logging(LOG_LEVEL)
    return Model(load_config())
