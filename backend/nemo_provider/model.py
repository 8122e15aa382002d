"""Provider model: turns a routed request into a NEMO feature collection."""

from typing import Any, Callable, Dict, Mapping, Optional, Union

from .features import TransformError, build_feature_collection
from .models import CollectionMetadata, ProviderConfig, ProviderRequest
from .nemo import FetchError, NemoClient, build_fetch_options
from .parsers import ParameterError, resolve
from .utils.logging import get_logger

logger = get_logger(__name__)

ProviderErrors = (ParameterError, FetchError, TransformError)

Callback = Callable[[Optional[Exception], Optional[Dict[str, Any]]], Any]


class DeliveryError(Exception):
    """Generic failure handed to a callback in place of an internal error."""

    def __init__(self, message: str = "Unable to deliver NEMO data"):
        super().__init__(message)


class Model:
    def __init__(self, config: Optional[ProviderConfig] = None):
        self.config = config or ProviderConfig()

    async def get_data(self, request: Union[ProviderRequest, Mapping[str, Any]]) -> Dict[str, Any]:
        """Fetch a form's responses and return them as a FeatureCollection.

        Raises ``ParameterError`` before any network activity when the route
        parameters are malformed, ``FetchError`` when the upstream call fails
        and ``TransformError`` when a response cannot be mapped. No partial
        collection is ever returned.
        """
        if not isinstance(request, ProviderRequest):
            request = ProviderRequest.model_validate(request)

        spec = resolve(request.params.host, request.params.id)
        options = build_fetch_options(spec, user_agent=self.config.user_agent)

        logger.info(
            "Fetching NEMO responses",
            extra={
                'target_host': spec.host,
                'mission': spec.mission,
                'form_id': spec.form_id
            }
        )

        async with NemoClient(timeout=self.config.timeout) as client:
            records = await client.fetch_responses(options, spec.host)

        try:
            geojson = build_feature_collection(
                records,
                metadata=CollectionMetadata(
                    name=self.config.metadata_name,
                    idField=self.config.id_field,
                ),
                ttl=self.config.ttl,
            )
        except TransformError as exc:
            logger.error(
                f"Failed to transform NEMO response: {exc}",
                extra={'target_host': spec.host, 'form_id': spec.form_id}
            )
            raise

        located = sum(1 for feature in geojson['features'] if 'geometry' in feature)
        logger.info(
            f"Built {len(geojson['features'])} features ({located} with geometry)",
            extra={'target_host': spec.host, 'form_id': spec.form_id}
        )
        return geojson

    async def get_data_with_callback(
        self,
        request: Union[ProviderRequest, Mapping[str, Any]],
        callback: Callback,
    ) -> None:
        """Deliver ``get_data`` through a ``callback(error, geojson)`` pair."""
        try:
            geojson = await self.get_data(request)
        except ProviderErrors as exc:
            self._deliver(callback, exc, None)
            return
        except Exception:
            logger.exception("Unexpected error while building NEMO data")
            self._deliver(callback, DeliveryError(), None)
            return

        self._deliver(callback, None, geojson)

    def _deliver(
        self,
        callback: Callback,
        error: Optional[Exception],
        geojson: Optional[Dict[str, Any]],
    ) -> None:
        try:
            callback(error, geojson)
            return
        except Exception:
            logger.exception("Result delivery failed")

        try:
            callback(DeliveryError(), None)
        except Exception:
            logger.exception("Error delivery failed; giving up")
