#!/usr/bin/env python3
"""Generate seismicity dashboard assets (data + HTML) from an earthquake catalog."""
from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime, timezone
from functools import cached_property
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from quakeboard import aggregate
from quakeboard.aggregate import SummaryStats
from quakeboard.build_reporting_datasets import display_path
from quakeboard.catalog import SOURCE_CRS, DatasetError, EmptyDatasetError, SeismicCatalog, SeismicEvent, load_catalog
from quakeboard.overlay import OVERLAY_SOURCE, OverlayResult, fetch_overlay

OUTPUT_DIR = Path(os.environ.get('QUAKE_DASHBOARD_OUTPUT', Path.cwd() / 'seismic_dashboard'))
DASHBOARD_TITLE = os.environ.get('QUAKE_DASHBOARD_TITLE', 'Sagaing Fault Seismicity Dashboard')
MAP_LAT = float(os.environ.get('QUAKE_MAP_LAT', 21.9))  # Sagaing Fault default
MAP_LNG = float(os.environ.get('QUAKE_MAP_LNG', 96.0))
MAP_ZOOM = int(os.environ.get('QUAKE_MAP_ZOOM', 7))
FOCUS_ZOOM = 10
MISSING = '—'

# extra feed properties worth a popup row, with their display labels
POPUP_METADATA = [
    ('magType', 'Magnitude type'),
    ('status', 'Review status'),
    ('alert', 'PAGER alert'),
]

# (minimum magnitude, marker radius, fill colour), strongest first
MAGNITUDE_STYLES = [
    (7.0, 14, '#8B0000'),
    (6.0, 11, '#DC143C'),
    (5.0, 8, '#FF4500'),
    (4.0, 6, '#FF6347'),
    (float('-inf'), 4, '#FFA07A'),
]

CHART_COLORS = {
    'primary': 'rgba(59, 130, 246, 1)',
    'primaryFaded': 'rgba(59, 130, 246, 0.3)',
    'secondary': 'rgba(16, 185, 129, 1)',
    'secondaryFaded': 'rgba(16, 185, 129, 0.3)',
    'danger': 'rgba(239, 68, 68, 1)',
    'dangerFaded': 'rgba(239, 68, 68, 0.3)',
    'warning': 'rgba(245, 158, 11, 1)',
    'warningFaded': 'rgba(245, 158, 11, 0.3)',
    'text': '#94a3b8',
    'grid': 'rgba(51, 65, 85, 0.5)',
}
MAGNITUDE_BAND_COLORS = ['#FFA07A', '#FF6347', '#FF4500', '#DC143C', '#8B0000']
DEPTH_BAND_COLORS = [
    ('rgba(239, 68, 68, 0.7)', '#ef4444'),
    ('rgba(245, 158, 11, 0.7)', '#f59e0b'),
    ('rgba(16, 185, 129, 0.7)', '#10b981'),
    ('rgba(59, 130, 246, 0.7)', '#3b82f6'),
]


def marker_style(magnitude: float) -> Dict:
    for floor, radius, color in MAGNITUDE_STYLES:
        if magnitude >= floor:
            break
    return {
        'radius': radius,
        'fillColor': color,
        'color': '#fff',
        'weight': 2,
        'opacity': 1,
        'fillOpacity': 0.85,
    }


def _utc(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)


def format_timestamp(timestamp_ms: int) -> str:
    dt = _utc(timestamp_ms)
    return f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M %p} UTC"


def format_date(timestamp_ms: int) -> str:
    dt = _utc(timestamp_ms)
    return f"{dt:%b} {dt.day}, {dt.year}"


def _day_label(day: str) -> str:
    dt = datetime.strptime(day, '%Y-%m-%d')
    return f"{dt:%b} {dt.day}"


def _month_label(month: str) -> str:
    return datetime.strptime(month, '%Y-%m').strftime('%b %Y')


def _fixed(value: Optional[float], places: int) -> str:
    if value is None:
        return MISSING
    return f"{value:.{places}f}"


def _magnitude_text(magnitude: float) -> str:
    return f"{magnitude:g}"


def _coordinate_text(latitude: float, longitude: float) -> str:
    ns = 'N' if latitude >= 0 else 'S'
    ew = 'E' if longitude >= 0 else 'W'
    return f"{abs(latitude):.4f}°{ns}, {abs(longitude):.4f}°{ew}"


# -----------------------------------------------------------------------------------------------
# Rendering session


class DashboardSession:
    """Owns one loaded catalog plus its overlay and derives everything the page draws.

    The catalog is immutable, so aggregates are computed once and reused.
    """

    def __init__(
        self,
        catalog: SeismicCatalog,
        overlay: Optional[OverlayResult] = None,
        center: Tuple[float, float] = (MAP_LAT, MAP_LNG),
        zoom: int = MAP_ZOOM,
        focus_zoom: int = FOCUS_ZOOM,
        strong_magnitude: float = aggregate.STRONG_MAGNITUDE,
        title: str = DASHBOARD_TITLE,
    ) -> None:
        self.catalog = catalog
        self.overlay = overlay or OverlayResult.absent('no overlay configured')
        self.center = center
        self.zoom = zoom
        self.focus_zoom = focus_zoom
        self.strong_magnitude = strong_magnitude
        self.title = title

    @property
    def events(self) -> Tuple[SeismicEvent, ...]:
        return self.catalog.events

    @cached_property
    def summary(self) -> Optional[SummaryStats]:
        try:
            return aggregate.compute_summary(self.events)
        except EmptyDatasetError:
            return None

    @cached_property
    def magnitude_bands(self) -> Dict[str, int]:
        return aggregate.bucket_by_magnitude(self.events)

    @cached_property
    def depth_bands(self) -> Dict[str, int]:
        return aggregate.bucket_by_depth(self.events)

    @cached_property
    def major_events(self) -> List[SeismicEvent]:
        return aggregate.top_events(self.events, self.strong_magnitude)

    def display_fields(self) -> Dict[str, str]:
        summary = self.summary
        return {
            'totalEvents': str(len(self.events)),
            'maxMagnitude': _fixed(summary.max_magnitude if summary else None, 1),
            'strongEvents': str(len(self.major_events)),
            'strongThreshold': _magnitude_text(self.strong_magnitude),
            'avgDepth': _fixed(summary.mean_depth_km if summary else None, 1),
            'dailyAvg': _fixed(summary.daily_rate if summary else None, 2),
        }

    def popup(self, event: SeismicEvent) -> Dict:
        rows = [
            ['Location', event.place or MISSING],
            ['Date', format_timestamp(event.timestamp_ms)],
            ['Depth', f"{event.depth_km:.1f} km"],
            ['Coords', _coordinate_text(event.latitude, event.longitude)],
        ]
        if event.felt_reports:
            rows.append(['Felt Reports', str(event.felt_reports)])
        rows.extend([label, event.metadata[key]] for key, label in POPUP_METADATA if key in event.metadata)
        return {
            'title': f"M {_magnitude_text(event.magnitude)} Earthquake",
            'rows': rows,
            'url': event.reference_url,
        }

    def event_markers(self) -> List[Dict]:
        return [
            {
                'lat': event.latitude,
                'lng': event.longitude,
                'style': marker_style(event.magnitude),
                'popup': self.popup(event),
            }
            for event in self.events
        ]

    def major_event_rows(self) -> List[Dict]:
        return [
            {
                'date': format_date(event.timestamp_ms),
                'magnitude': f"M {_magnitude_text(event.magnitude)}",
                'badge': 'mag-high' if event.magnitude >= 6 else 'mag-medium',
                'depth': f"{event.depth_km:.1f} km",
                'place': event.place,
                'focus': [event.latitude, event.longitude, self.focus_zoom],
            }
            for event in self.major_events
        ]

    def charts(self) -> Dict[str, Dict]:
        daily = aggregate.daily_counts(self.events)
        monthly = aggregate.monthly_counts(self.events)
        return {
            'timeline': {
                'labels': [_day_label(day) for day, _ in daily],
                'values': [count for _, count in daily],
            },
            'magnitude': {
                'labels': list(self.magnitude_bands),
                'values': list(self.magnitude_bands.values()),
                'colors': MAGNITUDE_BAND_COLORS,
            },
            'depth': {
                'labels': list(self.depth_bands),
                'values': list(self.depth_bands.values()),
                'colors': [fill for fill, _ in DEPTH_BAND_COLORS],
                'borders': [border for _, border in DEPTH_BAND_COLORS],
            },
            'cumulative': {
                'points': [{'x': ts, 'y': rank} for ts, rank in aggregate.cumulative_series(self.events)],
            },
            'monthly': {
                'labels': [_month_label(month) for month, _ in monthly],
                'values': [count for _, count in monthly],
            },
            'scatter': {
                'points': [{'x': depth, 'y': mag} for depth, mag in aggregate.magnitude_depth_pairs(self.events)],
            },
        }

    def analysis(self) -> Dict:
        summary = self.summary
        if summary is None:
            return {'totalEvents': 0}
        return {
            'totalEvents': summary.count,
            'magnitudeStats': {
                'min': summary.min_magnitude,
                'max': summary.max_magnitude,
                'mean': round(summary.mean_magnitude, 2),
                'eventsAbove': {f"{k:g}": v for k, v in summary.threshold_counts.items()},
            },
            'depthStats': {
                'min': round(summary.min_depth_km, 1),
                'max': round(summary.max_depth_km, 1),
                'mean': round(summary.mean_depth_km, 1),
                'shallow': summary.shallow_count,
                'intermediate': summary.intermediate_count,
                'deep': summary.deep_count,
            },
            'temporalStats': {
                'startDate': summary.start_date,
                'endDate': summary.end_date,
                'durationDays': summary.duration_days,
                'eventsPerDay': round(summary.daily_rate, 2),
            },
        }

    def payload(self) -> Dict:
        return {
            'title': self.title,
            'map': {
                'center': list(self.center),
                'zoom': self.zoom,
                'focusZoom': self.focus_zoom,
            },
            'stats': self.display_fields(),
            'events': self.event_markers(),
            'overlay': self.overlay.data,
            'overlayStatus': {
                'available': self.overlay.available,
                'reason': self.overlay.reason,
                'source': self.overlay.source,
            },
            'majorEvents': self.major_event_rows(),
            'charts': self.charts(),
            'chartColors': CHART_COLORS,
            'analysis': self.analysis(),
        }


def print_analysis(session: DashboardSession) -> None:
    summary = session.summary
    if summary is None:
        print('⚠️  Catalog is empty; statistics are shown as absent.')
        return
    print(
        f"📊 {summary.count} events · M {summary.min_magnitude:g}–{summary.max_magnitude:g} "
        f"(mean {summary.mean_magnitude:.2f}) · depth {summary.min_depth_km:.1f}–{summary.max_depth_km:.1f} km"
    )
    print(
        f"   {summary.start_date} → {summary.end_date} ({summary.duration_days} days, "
        f"{summary.daily_rate:.2f}/day) · {len(session.major_events)} events ≥ M {session.strong_magnitude:g}"
    )


# -----------------------------------------------------------------------------------------------
# Writers


def _write_data_js(payload: Dict, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    data_js = output_dir / 'seismic_data.js'
    body = json.dumps(payload, ensure_ascii=False).replace('</', '<\\/')
    data_js.write_text(f"window.SEISMIC_DATA = {body};\n", encoding='utf-8')
    print(f"✔️  Wrote {display_path(data_js)}")
    return data_js


def _write_dashboard_html(output_dir: Path, title: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / 'seismic_dashboard.html'
    html_template = """<!DOCTYPE html>
<html lang='en'>
<head>
  <meta charset='utf-8' />
  <title>__QUAKE_TITLE__</title>
  <meta name='viewport' content='width=device-width, initial-scale=1' />
  <link rel='stylesheet' href='https://unpkg.com/leaflet@1.9.4/dist/leaflet.css' />
  <style>
    * { box-sizing: border-box; }
    body { margin: 0; font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; background: #0f172a; color: #e2e8f0; }
    header { padding: 32px 48px 12px; max-width: 1280px; margin: 0 auto; }
    h1 { font-size: clamp(2rem, 3.4vw, 2.8rem); margin: 0 0 0.4rem; }
    main { max-width: 1280px; margin: 0 auto; padding: 0 48px 56px; display: flex; flex-direction: column; gap: 24px; }
    .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 16px; }
    .stat { border-radius: 18px; padding: 16px 20px; background: #1e293b; border: 1px solid rgba(148,163,184,0.2); }
    .stat span { display: block; color: #94a3b8; font-size: 0.85rem; }
    .stat strong { font-size: 1.8rem; }
    #map { width: 100%; height: 62vh; border-radius: 24px; border: 1px solid rgba(59,130,246,0.25); }
    .toggles { display: flex; gap: 18px; font-size: 0.9rem; color: #cbd5f5; }
    .toggles .muted { color: #64748b; }
    .charts { display: grid; grid-template-columns: repeat(auto-fit, minmax(380px, 1fr)); gap: 18px; }
    .card { border-radius: 20px; padding: 16px 20px; background: #1e293b; border: 1px solid rgba(148,163,184,0.2); }
    .card h3 { margin: 0 0 10px; font-size: 1rem; }
    .card .canvas-wrap { position: relative; height: 280px; }
    table { width: 100%; border-collapse: collapse; font-size: 0.9rem; }
    th, td { text-align: left; padding: 8px 10px; border-bottom: 1px solid rgba(148,163,184,0.15); }
    tbody tr { cursor: pointer; }
    tbody tr:hover { background: rgba(59,130,246,0.12); }
    .mag-badge { border-radius: 999px; padding: 2px 10px; font-weight: 600; }
    .mag-high { background: rgba(220,20,60,0.25); color: #fca5a5; }
    .mag-medium { background: rgba(255,69,0,0.2); color: #fdba74; }
  </style>
</head>
<body>
<header>
  <h1>__QUAKE_TITLE__</h1>
</header>
<main>
  <section class='stats'>
    <div class='stat'><span>Total events</span><strong id='total-events'></strong></div>
    <div class='stat'><span>Max magnitude</span><strong id='max-magnitude'></strong></div>
    <div class='stat'><span id='strong-label'>Strong events</span><strong id='strong-events'></strong></div>
    <div class='stat'><span>Average depth (km)</span><strong id='avg-depth'></strong></div>
    <div class='stat'><span>Events per day</span><strong id='daily-avg'></strong></div>
  </section>
  <div class='toggles'>
    <label><input type='checkbox' id='toggle-earthquakes' checked /> Earthquakes</label>
    <label id='toggle-faults-label'><input type='checkbox' id='toggle-faults' checked /> Tectonic features</label>
  </div>
  <div id='map'></div>
  <section class='charts'>
    <div class='card'><h3>Earthquakes per day</h3><div class='canvas-wrap'><canvas id='timelineChart'></canvas></div></div>
    <div class='card'><h3>Magnitude distribution</h3><div class='canvas-wrap'><canvas id='magnitudeChart'></canvas></div></div>
    <div class='card'><h3>Depth distribution</h3><div class='canvas-wrap'><canvas id='depthChart'></canvas></div></div>
    <div class='card'><h3>Cumulative events</h3><div class='canvas-wrap'><canvas id='cumulativeChart'></canvas></div></div>
    <div class='card'><h3>Events per month</h3><div class='canvas-wrap'><canvas id='monthlyChart'></canvas></div></div>
    <div class='card'><h3>Depth vs magnitude</h3><div class='canvas-wrap'><canvas id='scatterChart'></canvas></div></div>
  </section>
  <section class='card'>
    <h3>Major events</h3>
    <table id='major-events-table'>
      <thead><tr><th>Date</th><th>Magnitude</th><th>Depth</th><th>Location</th></tr></thead>
      <tbody></tbody>
    </table>
  </section>
</main>
<script src='https://unpkg.com/leaflet@1.9.4/dist/leaflet.js'></script>
<script src='https://cdn.jsdelivr.net/npm/chart.js@4.4.1/dist/chart.umd.min.js'></script>
<script src='https://cdn.jsdelivr.net/npm/chartjs-adapter-date-fns@3.0.0/dist/chartjs-adapter-date-fns.bundle.min.js'></script>
<script src='seismic_data.js'></script>
<script>
  const data = window.SEISMIC_DATA;
  const colors = data.chartColors;

  function popupNode(title, rows, url, accent) {
    const root = document.createElement('div');
    root.style.minWidth = '200px';
    const heading = document.createElement('h3');
    heading.style.cssText = `margin: 0 0 8px; color: ${accent}; font-size: 1.05rem;`;
    heading.textContent = title;
    root.appendChild(heading);
    rows.forEach(([label, value]) => {
      const p = document.createElement('p');
      p.style.margin = '3px 0';
      const strong = document.createElement('strong');
      strong.textContent = `${label}: `;
      p.appendChild(strong);
      p.appendChild(document.createTextNode(value));
      root.appendChild(p);
    });
    if (url) {
      const link = document.createElement('a');
      link.href = url;
      link.target = '_blank';
      link.rel = 'noopener';
      link.textContent = 'View on USGS →';
      root.appendChild(link);
    }
    return root;
  }

  const map = L.map('map', { center: data.map.center, zoom: data.map.zoom, zoomControl: true });
  L.tileLayer('https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png', {
    attribution: '&copy; <a href="https://www.openstreetmap.org/copyright">OSM</a> &copy; <a href="https://carto.com/attributions">CARTO</a>',
    maxZoom: 19,
  }).addTo(map);

  let tectonicLayer = null;
  if (data.overlay) {
    tectonicLayer = L.geoJSON(data.overlay, {
      style: { color: '#3b82f6', weight: 2.5, opacity: 0.8 },
      onEachFeature: (feature, layer) => {
        const rows = Object.entries(feature.properties || {});
        if (rows.length) layer.bindPopup(popupNode('Tectonic Feature', rows, null, '#3b82f6'));
      },
    }).addTo(map);
  } else {
    document.getElementById('toggle-faults').disabled = true;
    document.getElementById('toggle-faults').checked = false;
    const label = document.getElementById('toggle-faults-label');
    label.classList.add('muted');
    label.title = data.overlayStatus.reason || 'Overlay unavailable';
  }

  const earthquakeLayer = L.layerGroup(
    data.events.map((event) => L.circleMarker([event.lat, event.lng], event.style)
      .bindPopup(popupNode(event.popup.title, event.popup.rows, event.popup.url, '#ef4444'))),
  ).addTo(map);

  document.getElementById('toggle-earthquakes').addEventListener('change', (e) => {
    if (e.target.checked) earthquakeLayer.addTo(map); else map.removeLayer(earthquakeLayer);
  });
  document.getElementById('toggle-faults').addEventListener('change', (e) => {
    if (!tectonicLayer) return;
    if (e.target.checked) tectonicLayer.addTo(map); else map.removeLayer(tectonicLayer);
  });

  const stats = data.stats;
  document.getElementById('total-events').textContent = stats.totalEvents;
  document.getElementById('max-magnitude').textContent = stats.maxMagnitude;
  document.getElementById('strong-events').textContent = stats.strongEvents;
  document.getElementById('strong-label').textContent = `Strong events (M ≥ ${stats.strongThreshold})`;
  document.getElementById('avg-depth').textContent = stats.avgDepth;
  document.getElementById('daily-avg').textContent = stats.dailyAvg;

  const tbody = document.querySelector('#major-events-table tbody');
  data.majorEvents.forEach((row) => {
    const tr = document.createElement('tr');
    [row.date, null, row.depth, row.place].forEach((value, idx) => {
      const td = document.createElement('td');
      if (idx === 1) {
        const badge = document.createElement('span');
        badge.className = `mag-badge ${row.badge}`;
        badge.textContent = row.magnitude;
        td.appendChild(badge);
      } else {
        td.textContent = value;
      }
      tr.appendChild(td);
    });
    tr.addEventListener('click', () => map.setView([row.focus[0], row.focus[1]], row.focus[2]));
    tbody.appendChild(tr);
  });

  const axis = (title) => ({
    ticks: { color: colors.text },
    grid: { color: colors.grid },
    beginAtZero: true,
    title: { display: Boolean(title), text: title || '', color: colors.text },
  });
  const base = { responsive: true, maintainAspectRatio: false, plugins: { legend: { display: false } } };
  const charts = data.charts;

  new Chart(document.getElementById('timelineChart'), {
    type: 'bar',
    data: { labels: charts.timeline.labels, datasets: [{ label: 'Earthquakes per Day', data: charts.timeline.values, backgroundColor: colors.primaryFaded, borderColor: colors.primary, borderWidth: 1 }] },
    options: { ...base, scales: { x: { ticks: { color: colors.text, maxRotation: 45, minRotation: 45 }, grid: { display: false } }, y: axis('Number of Events') } },
  });
  new Chart(document.getElementById('magnitudeChart'), {
    type: 'doughnut',
    data: { labels: charts.magnitude.labels, datasets: [{ data: charts.magnitude.values, backgroundColor: charts.magnitude.colors, borderColor: '#1e293b', borderWidth: 2 }] },
    options: { responsive: true, maintainAspectRatio: false, plugins: { legend: { position: 'right', labels: { color: colors.text, font: { family: 'Inter', size: 11 }, padding: 10 } } } },
  });
  new Chart(document.getElementById('depthChart'), {
    type: 'bar',
    data: { labels: charts.depth.labels, datasets: [{ label: 'Number of Events', data: charts.depth.values, backgroundColor: charts.depth.colors, borderColor: charts.depth.borders, borderWidth: 1 }] },
    options: { ...base, scales: { x: { ticks: { color: colors.text }, grid: { display: false } }, y: axis() } },
  });
  new Chart(document.getElementById('cumulativeChart'), {
    type: 'line',
    data: { datasets: [{ label: 'Cumulative Events', data: charts.cumulative.points, borderColor: colors.secondary, backgroundColor: colors.secondaryFaded, fill: true, tension: 0.1, pointRadius: 0 }] },
    options: { ...base, scales: { x: { type: 'time', time: { unit: 'month', displayFormats: { month: 'MMM yyyy' } }, ticks: { color: colors.text }, grid: { color: colors.grid } }, y: axis('Total Events') } },
  });
  new Chart(document.getElementById('monthlyChart'), {
    type: 'bar',
    data: { labels: charts.monthly.labels, datasets: [{ label: 'Events per Month', data: charts.monthly.values, backgroundColor: colors.warningFaded, borderColor: colors.warning, borderWidth: 1 }] },
    options: { ...base, scales: { x: { ticks: { color: colors.text }, grid: { display: false } }, y: axis('Number of Events') } },
  });
  new Chart(document.getElementById('scatterChart'), {
    type: 'scatter',
    data: { datasets: [{ label: 'Earthquakes', data: charts.scatter.points, backgroundColor: colors.dangerFaded, borderColor: colors.danger, borderWidth: 1, pointRadius: 5, pointHoverRadius: 8 }] },
    options: {
      ...base,
      plugins: { legend: { display: false }, tooltip: { callbacks: { label: (ctx) => `Depth: ${ctx.parsed.x} km, Mag: ${ctx.parsed.y}` } } },
      scales: { x: { ...axis('Depth (km)'), beginAtZero: false }, y: { ...axis('Magnitude'), beginAtZero: false } },
    },
  });
</script>
</body>
</html>
"""
    safe_title = title.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')
    html_path.write_text(html_template.replace('__QUAKE_TITLE__', safe_title), encoding='utf-8')
    print(f"✔️  Wrote {display_path(html_path)}")
    return html_path


def build_dashboard(
    dataset: Optional[Path] = None,
    overlay_source: Optional[str] = OVERLAY_SOURCE,
    output_dir: Path = OUTPUT_DIR,
    source_crs: Optional[str] = SOURCE_CRS,
    **session_options,
) -> DashboardSession:
    catalog = load_catalog(dataset, source_crs=source_crs)
    overlay = fetch_overlay(overlay_source)
    session = DashboardSession(catalog, overlay, **session_options)
    _write_data_js(session.payload(), Path(output_dir))
    _write_dashboard_html(Path(output_dir), session.title)
    return session


def main() -> None:
    parser = argparse.ArgumentParser(description='Build the seismicity dashboard (HTML + data script).')
    parser.add_argument('--dataset', type=Path, default=None, help='GeoJSON or JS data file (default: $QUAKE_DATASET_FILE)')
    parser.add_argument('--overlay', default=OVERLAY_SOURCE, help='URL, GeoJSON, .shp or zipped shapefile with fault traces')
    parser.add_argument('--output', type=Path, default=OUTPUT_DIR, help='Directory for the dashboard files')
    parser.add_argument('--source-crs', default=SOURCE_CRS, help='CRS of the catalog coordinates, e.g. EPSG:25832')
    parser.add_argument('--title', default=DASHBOARD_TITLE)
    parser.add_argument('--center', nargs=2, type=float, metavar=('LAT', 'LNG'), default=(MAP_LAT, MAP_LNG))
    parser.add_argument('--zoom', type=int, default=MAP_ZOOM)
    parser.add_argument('--min-magnitude', type=float, default=aggregate.STRONG_MAGNITUDE, help='Threshold for the major events table')
    args = parser.parse_args()

    try:
        session = build_dashboard(
            args.dataset,
            overlay_source=args.overlay,
            output_dir=args.output,
            source_crs=args.source_crs,
            center=tuple(args.center),
            zoom=args.zoom,
            strong_magnitude=args.min_magnitude,
            title=args.title,
        )
    except (FileNotFoundError, DatasetError) as exc:
        print(f"❌ {exc}", file=sys.stderr)
        sys.exit(1)
    print_analysis(session)


if __name__ == '__main__':
    main()
