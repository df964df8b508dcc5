"""Optional fault/lineament overlay shown beneath the earthquake markers.

The overlay is auxiliary: any failure to fetch or parse it produces an
``OverlayResult`` in the *absent* state instead of raising, and the dashboard
is built without it.
"""
from __future__ import annotations

import json
import os
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import requests
import shapefile  # type: ignore

OVERLAY_SOURCE = os.environ.get('QUAKE_OVERLAY_SOURCE') or None
REQUEST_TIMEOUT = 30

# members copied out of a zipped shapefile; everything else in the archive is ignored
SHAPEFILE_PARTS = ('.shp', '.shx', '.dbf', '.prj', '.cpg')


class OverlayError(Exception):
    pass


@dataclass(frozen=True)
class OverlayResult:
    data: Optional[Dict] = None
    reason: Optional[str] = None
    source: str = ''

    @classmethod
    def loaded(cls, data: Dict, source: str) -> 'OverlayResult':
        return cls(data=data, source=source)

    @classmethod
    def absent(cls, reason: str, source: str = '') -> 'OverlayResult':
        return cls(reason=reason, source=source)

    @property
    def available(self) -> bool:
        return self.data is not None

    @property
    def feature_count(self) -> int:
        return len(self.data['features']) if self.data else 0


def _clean_properties(props: Optional[Dict]) -> Dict[str, str]:
    return {str(key): str(value) for key, value in (props or {}).items() if value not in (None, '', False)}


def _normalise(document) -> Dict:
    if not isinstance(document, dict) or document.get('type') != 'FeatureCollection':
        raise OverlayError('overlay is not a GeoJSON FeatureCollection')
    features = document.get('features')
    if not isinstance(features, list):
        raise OverlayError('overlay has no features list')
    cleaned: List[Dict] = []
    for feature in features:
        if not isinstance(feature, dict) or not feature.get('geometry'):
            continue
        cleaned.append(
            {
                'type': 'Feature',
                'geometry': feature['geometry'],
                'properties': _clean_properties(feature.get('properties')),
            }
        )
    return {'type': 'FeatureCollection', 'features': cleaned}


def _read_shapefile(shp_path: Path) -> Dict:
    reader = shapefile.Reader(str(shp_path))
    try:
        fields = [field[0] for field in reader.fields[1:]]
        features = []
        for shape_record in reader.iterShapeRecords():
            if not shape_record.shape.points:
                continue
            features.append(
                {
                    'type': 'Feature',
                    'geometry': shape_record.shape.__geo_interface__,
                    'properties': {name: value for name, value in zip(fields, shape_record.record)},
                }
            )
    finally:
        reader.close()
    return {'type': 'FeatureCollection', 'features': features}


def _read_zipped_shapefile(zip_path: Path) -> Dict:
    with tempfile.TemporaryDirectory() as tmpdir:
        with zipfile.ZipFile(zip_path) as archive:
            for member in archive.infolist():
                name = Path(member.filename.replace('\\', '/')).name
                if member.is_dir() or Path(name).suffix.lower() not in SHAPEFILE_PARTS:
                    continue
                # flattened to the bare file name so no member lands outside tmpdir
                with archive.open(member) as src, open(Path(tmpdir) / name, 'wb') as dst:
                    shutil.copyfileobj(src, dst)
        candidates = sorted(Path(tmpdir).glob('*.shp'))
        if not candidates:
            raise OverlayError(f"no .shp file inside {zip_path.name}")
        return _read_shapefile(candidates[0])


def _fetch_remote(url: str) -> Dict:
    response = requests.get(url, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.json()


def _read_local(path: Path) -> Dict:
    if not path.exists():
        raise FileNotFoundError(f"Missing overlay file: {path}")
    suffix = path.suffix.lower()
    if suffix == '.zip':
        return _read_zipped_shapefile(path)
    if suffix == '.shp':
        return _read_shapefile(path)
    return json.loads(path.read_text(encoding='utf-8'))


def fetch_overlay(source: Optional[str] = OVERLAY_SOURCE) -> OverlayResult:
    if not source:
        return OverlayResult.absent('no overlay configured')
    source = str(source)
    try:
        if source.startswith(('http://', 'https://')):
            document = _fetch_remote(source)
        else:
            document = _read_local(Path(source))
        data = _normalise(document)
    except (requests.RequestException, ValueError, OSError, OverlayError, shapefile.ShapefileException, zipfile.BadZipFile) as exc:
        print(f"⚠️  Could not load overlay {source}: {exc}")
        return OverlayResult.absent(str(exc), source=source)
    return OverlayResult.loaded(data, source=source)
