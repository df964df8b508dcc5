import contextlib
import json
import zipfile

import requests
import shapefile

from quakeboard import overlay

FAULTS = {
    'type': 'FeatureCollection',
    'features': [
        {
            'type': 'Feature',
            'properties': {'name': 'Sagaing Fault', 'slip_rate': 18, 'notes': '', 'source': None},
            'geometry': {'type': 'LineString', 'coordinates': [[96.0, 21.0], [96.1, 22.5]]},
        },
        {'type': 'Feature', 'properties': {'name': 'no geometry'}, 'geometry': None},
    ],
}


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        return self._payload


def _write_fault_shapefile(base):
    writer = shapefile.Writer(str(base), shapeType=shapefile.POLYLINE)
    writer.field('NAME', 'C', size=40)
    writer.line([[[96.0, 21.0], [96.1, 22.5]]])
    writer.record('Sagaing Fault')
    writer.close()


def test_no_source_is_absent():
    result = overlay.fetch_overlay(None)
    assert not result.available
    assert result.reason == 'no overlay configured'
    assert result.feature_count == 0


def test_remote_overlay_loaded(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return _FakeResponse(FAULTS)

    monkeypatch.setattr(overlay.requests, 'get', fake_get)
    result = overlay.fetch_overlay('https://example.org/faults.geojson')

    assert result.available
    assert result.reason is None
    assert calls == [('https://example.org/faults.geojson', overlay.REQUEST_TIMEOUT)]
    assert result.feature_count == 1
    assert result.data['features'][0]['properties'] == {'name': 'Sagaing Fault', 'slip_rate': '18'}


def test_remote_failure_degrades(monkeypatch, capsys):
    def fake_get(url, timeout):
        raise requests.ConnectionError('connection refused')

    monkeypatch.setattr(overlay.requests, 'get', fake_get)
    result = overlay.fetch_overlay('https://example.org/faults.geojson')

    assert not result.available
    assert 'connection refused' in result.reason
    assert result.source == 'https://example.org/faults.geojson'
    assert '⚠️' in capsys.readouterr().out


def test_http_error_degrades(monkeypatch):
    monkeypatch.setattr(overlay.requests, 'get', lambda url, timeout: _FakeResponse({}, status_code=404))
    result = overlay.fetch_overlay('https://example.org/missing.geojson')
    assert not result.available
    assert '404' in result.reason


def test_unexpected_payload_degrades(monkeypatch):
    monkeypatch.setattr(overlay.requests, 'get', lambda url, timeout: _FakeResponse(['not', 'geojson']))
    result = overlay.fetch_overlay('https://example.org/faults.geojson')
    assert not result.available
    assert 'FeatureCollection' in result.reason


def test_local_geojson(tmp_path):
    path = tmp_path / 'faults.geojson'
    path.write_text(json.dumps(FAULTS), encoding='utf-8')
    result = overlay.fetch_overlay(str(path))
    assert result.available
    assert result.feature_count == 1


def test_local_broken_json_degrades(tmp_path):
    path = tmp_path / 'faults.geojson'
    path.write_text('{', encoding='utf-8')
    assert not overlay.fetch_overlay(str(path)).available


def test_missing_local_file_degrades(tmp_path):
    result = overlay.fetch_overlay(str(tmp_path / 'nowhere.geojson'))
    assert not result.available
    assert 'Missing overlay file' in result.reason


def test_shapefile_overlay(tmp_path):
    _write_fault_shapefile(tmp_path / 'faults')
    result = overlay.fetch_overlay(str(tmp_path / 'faults.shp'))

    assert result.available
    feature = result.data['features'][0]
    assert feature['geometry']['type'] == 'LineString'
    assert feature['properties'] == {'NAME': 'Sagaing Fault'}


def test_zipped_shapefile_overlay(tmp_path):
    shp_dir = tmp_path / 'shp'
    shp_dir.mkdir()
    _write_fault_shapefile(shp_dir / 'faults')
    archive_path = tmp_path / 'faults.zip'
    with zipfile.ZipFile(archive_path, 'w') as archive:
        for part in shp_dir.iterdir():
            archive.write(part, arcname=f'layers/{part.name}')

    result = overlay.fetch_overlay(str(archive_path))

    assert result.available
    assert result.feature_count == 1


def test_zip_without_shapefile_degrades(tmp_path):
    archive_path = tmp_path / 'empty.zip'
    with zipfile.ZipFile(archive_path, 'w') as archive:
        archive.writestr('readme.txt', 'nothing here')
    result = overlay.fetch_overlay(str(archive_path))
    assert not result.available
    assert 'no .shp file' in result.reason


def test_zip_members_stay_inside_scratch_dir(tmp_path, monkeypatch):
    shp_dir = tmp_path / 'src'
    shp_dir.mkdir()
    _write_fault_shapefile(shp_dir / 'faults')
    archive_path = tmp_path / 'faults.zip'
    with zipfile.ZipFile(archive_path, 'w') as archive:
        for part in shp_dir.iterdir():
            archive.writestr(f'../../{part.name}', part.read_bytes())
        archive.writestr('../../escape.txt', 'outside')

    scratch = tmp_path / 'work' / 'scratch'
    scratch.mkdir(parents=True)

    @contextlib.contextmanager
    def fixed_tmpdir():
        yield str(scratch)

    monkeypatch.setattr(overlay.tempfile, 'TemporaryDirectory', fixed_tmpdir)
    result = overlay.fetch_overlay(str(archive_path))

    assert result.available
    assert result.feature_count == 1
    assert (scratch / 'faults.shp').exists()
    assert not (tmp_path / 'faults.shp').exists()
    assert not (tmp_path / 'escape.txt').exists()
    assert not (scratch / 'escape.txt').exists()
