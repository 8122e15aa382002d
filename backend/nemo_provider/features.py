from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import CollectionMetadata, DEFAULT_TTL, RawRecord
from .utils.logging import get_logger

logger = get_logger(__name__)

LONGITUDE_KEY = "Longitude"
LATITUDE_KEY = "Latitude"


class TransformError(Exception):
    """Raised when a response record cannot be turned into a feature."""

    def __init__(self, index: int, reason: str):
        super().__init__(f"Record {index}: {reason}")
        self.index = index
        self.reason = reason


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def find_location_field(record: RawRecord) -> Optional[Tuple[str, Dict[str, Any]]]:
    """Return the first field holding a mapping with a numeric ``Longitude``."""
    for key, value in record.items():
        if isinstance(value, dict) and _is_number(value.get(LONGITUDE_KEY)):
            return key, value
    return None


def format_feature(record: RawRecord, index: int = 0) -> Dict[str, Any]:
    """Convert one survey response into a GeoJSON feature.

    The location question is promoted to a Point geometry and dropped from
    the properties. Records without one get no ``geometry`` key at all.
    """
    if not isinstance(record, dict):
        raise TransformError(index, f"expected an object, got {type(record).__name__}")

    located = find_location_field(record)

    if located is None:
        return {
            'type': 'Feature',
            'properties': dict(record),
        }

    location_key, location = located
    latitude = location.get(LATITUDE_KEY)
    if not _is_number(latitude):
        raise TransformError(
            index,
            f"field '{location_key}' has a Longitude but no numeric Latitude",
        )

    return {
        'type': 'Feature',
        'properties': {k: v for k, v in record.items() if k != location_key},
        'geometry': {
            'type': 'Point',
            'coordinates': [location[LONGITUDE_KEY], latitude],
        },
    }


def build_feature_collection(
    records: Iterable[RawRecord],
    metadata: Optional[CollectionMetadata] = None,
    ttl: Optional[int] = DEFAULT_TTL,
) -> Dict[str, Any]:
    """Map every record to a feature and wrap them for the serving layer."""
    features: List[Dict[str, Any]] = [
        format_feature(record, index) for index, record in enumerate(records)
    ]

    located = sum(1 for feature in features if 'geometry' in feature)
    if features and located < len(features):
        logger.debug(f"{len(features) - located} of {len(features)} responses have no location")

    collection: Dict[str, Any] = {
        'type': 'FeatureCollection',
        'features': features,
        'metadata': (metadata or CollectionMetadata()).model_dump(),
    }
    if ttl is not None:
        collection['ttl'] = ttl
    return collection
