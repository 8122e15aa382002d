"""Koop-style provider serving NEMO survey responses as GeoJSON.

Routes take the shape ``/nemo/:host/:id/FeatureServer/:layer/:method`` where
``host`` packs ``<host> <mission> <username> <password>`` and ``id`` is the
form identifier. Serving glue builds the model with
``create_model()``, which reads the environment and installs JSON logging.
"""

__version__ = "1.0.0"

from .features import TransformError
from .model import DeliveryError, Model
from .nemo import FetchError
from .parsers import ParameterError, ParameterErrorKind, resolve
from .settings import create_model

PROVIDER = {
    'type': 'provider',
    'name': 'nemo',
    'hosts': True,
    'disable_id_param': False,
    'Model': Model,
    'version': __version__,
}

__all__ = [
    "DeliveryError",
    "FetchError",
    "Model",
    "PROVIDER",
    "ParameterError",
    "ParameterErrorKind",
    "TransformError",
    "create_model",
    "resolve",
]
