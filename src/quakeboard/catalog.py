"""Earthquake catalog records and the GeoJSON loader that produces them."""
from __future__ import annotations

import json
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd
from pyproj import Transformer

DATASET_FILE = Path(os.environ.get('QUAKE_DATASET_FILE', Path.cwd() / 'data' / 'earthquakes.geojson'))
SOURCE_CRS = os.environ.get('QUAKE_SOURCE_CRS') or None

# Properties lifted into typed fields; anything else is carried as metadata.
MAGNITUDE_KEYS = ('mag', 'magnitude')
TIME_KEYS = ('time', 'timestampMs')
DEPTH_KEYS = ('depthKm', 'depth')
FELT_KEYS = ('felt', 'feltReports')
URL_KEYS = ('url', 'referenceUrl')
_TYPED_KEYS = set(MAGNITUDE_KEYS + TIME_KEYS + DEPTH_KEYS + FELT_KEYS + URL_KEYS + ('place',))

_JS_ASSIGNMENT = re.compile(r'^\s*(?:const|let|var)\s+[A-Za-z_$][\w$]*\s*=\s*', re.MULTILINE)

# epoch-millisecond bounds that pandas can still turn into calendar dates
MIN_TIMESTAMP_MS = -(-pd.Timestamp.min.value // 10**6)
MAX_TIMESTAMP_MS = pd.Timestamp.max.value // 10**6


class DatasetError(ValueError):
    """Base class for catalog problems."""


class InvalidDatasetError(DatasetError):
    pass


class EmptyDatasetError(DatasetError):
    pass


@dataclass(frozen=True)
class SeismicEvent:
    magnitude: float
    depth_km: float
    timestamp_ms: int
    latitude: float
    longitude: float
    place: str = ''
    felt_reports: Optional[int] = None
    reference_url: Optional[str] = None
    # ordered pass-through of extra feature properties, only read when rendering
    metadata: Mapping[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        # stored as a read-only copy of whatever mapping was passed in
        object.__setattr__(self, 'metadata', MappingProxyType(dict(self.metadata)))


@dataclass(frozen=True)
class SeismicCatalog:
    events: Tuple[SeismicEvent, ...]
    source: str = ''

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)


# -----------------------------------------------------------------------------------------------
# Field coercion


def _first_present(props: Dict, keys: Tuple[str, ...]):
    for key in keys:
        value = props.get(key)
        if value is not None and value != '':
            return value
    return None


def _finite_float(value, label: str, index: int) -> float:
    if isinstance(value, bool):
        raise InvalidDatasetError(f"Feature {index}: {label} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidDatasetError(f"Feature {index}: {label} must be numeric, got {value!r}") from None
    if math.isnan(number) or math.isinf(number):
        raise InvalidDatasetError(f"Feature {index}: {label} is not a finite number")
    return number


def _optional_int(value) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _optional_url(value) -> Optional[str]:
    if not value:
        return None
    text = str(value).strip()
    if not text or text == '#':
        return None
    return text


def _metadata(props: Dict) -> Dict[str, str]:
    return {
        str(key): str(value)
        for key, value in props.items()
        if key not in _TYPED_KEYS and value is not None and value != ''
    }


def parse_feature(feature: Dict, index: int, transformer: Optional[Transformer] = None) -> SeismicEvent:
    if not isinstance(feature, dict):
        raise InvalidDatasetError(f"Feature {index}: expected an object, got {type(feature).__name__}")
    props = feature.get('properties') or {}
    geometry = feature.get('geometry') or {}
    if not isinstance(props, dict) or not isinstance(geometry, dict):
        raise InvalidDatasetError(f"Feature {index}: properties and geometry must be objects")
    coords = geometry.get('coordinates')
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        raise InvalidDatasetError(f"Feature {index}: missing point coordinates")

    lon = _finite_float(coords[0], 'longitude', index)
    lat = _finite_float(coords[1], 'latitude', index)
    if transformer is not None:
        lon, lat = transformer.transform(lon, lat)
        lon = float(f"{lon:.6f}")
        lat = float(f"{lat:.6f}")

    magnitude = _first_present(props, MAGNITUDE_KEYS)
    if magnitude is None:
        raise InvalidDatasetError(f"Feature {index}: missing magnitude")
    timestamp = _first_present(props, TIME_KEYS)
    if timestamp is None:
        raise InvalidDatasetError(f"Feature {index}: missing time")

    depth = coords[2] if len(coords) > 2 and coords[2] is not None else _first_present(props, DEPTH_KEYS)
    if depth is None:
        raise InvalidDatasetError(f"Feature {index}: missing depth")
    depth_km = _finite_float(depth, 'depth', index)
    if depth_km < 0:
        raise InvalidDatasetError(f"Feature {index}: depth must be non-negative, got {depth_km}")

    timestamp_ms = int(_finite_float(timestamp, 'time', index))
    if not MIN_TIMESTAMP_MS <= timestamp_ms <= MAX_TIMESTAMP_MS:
        raise InvalidDatasetError(
            f"Feature {index}: time out of range ({timestamp_ms} ms is outside "
            f"{pd.Timestamp.min:%Y-%m-%d}..{pd.Timestamp.max:%Y-%m-%d})"
        )

    return SeismicEvent(
        magnitude=_finite_float(magnitude, 'magnitude', index),
        depth_km=depth_km,
        timestamp_ms=timestamp_ms,
        latitude=lat,
        longitude=lon,
        place=str(props.get('place') or ''),
        felt_reports=_optional_int(_first_present(props, FELT_KEYS)),
        reference_url=_optional_url(_first_present(props, URL_KEYS)),
        metadata=_metadata(props),
    )


# -----------------------------------------------------------------------------------------------
# Loading


def _read_document(path: Path) -> Dict:
    text = path.read_text(encoding='utf-8')
    if path.suffix.lower() == '.js':
        # dashboard data files are a single `const earthquakeData = {...};` assignment
        match = _JS_ASSIGNMENT.search(text)
        if match:
            text = text[match.end():]
        text = text.strip().rstrip(';')
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidDatasetError(f"{path.name} is not valid JSON: {exc}") from exc


def catalog_from_geojson(
    document: Dict,
    source: str = '',
    source_crs: Optional[str] = None,
) -> SeismicCatalog:
    if not isinstance(document, dict) or document.get('type') != 'FeatureCollection':
        raise InvalidDatasetError('Dataset must be a GeoJSON FeatureCollection')
    features = document.get('features')
    if not isinstance(features, list):
        raise InvalidDatasetError('FeatureCollection has no features list')
    transformer = Transformer.from_crs(source_crs, 'EPSG:4326', always_xy=True) if source_crs else None
    events: List[SeismicEvent] = [
        parse_feature(feature, idx, transformer) for idx, feature in enumerate(features)
    ]
    return SeismicCatalog(events=tuple(events), source=source)


def load_catalog(path: Optional[Path] = None, source_crs: Optional[str] = SOURCE_CRS) -> SeismicCatalog:
    path = Path(path or DATASET_FILE)
    if not path.exists():
        raise FileNotFoundError(f"Missing earthquake dataset: {path}")
    return catalog_from_geojson(_read_document(path), source=str(path), source_crs=source_crs)
