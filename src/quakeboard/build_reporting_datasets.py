#!/usr/bin/env python3
"""Write reporting-ready CSVs (events, series, distributions) from an earthquake catalog."""
from __future__ import annotations

import argparse
import os
import sys
from functools import partial
from pathlib import Path
from typing import Callable, Dict, Optional

import pandas as pd

from quakeboard import aggregate
from quakeboard.catalog import SOURCE_CRS, DatasetError, SeismicCatalog, load_catalog

OUTPUT_ROOT = Path(os.environ.get('QUAKE_REPORTING_OUTPUT', Path.cwd() / 'reports'))

ReportBuilder = Callable[[SeismicCatalog], pd.DataFrame]


def display_path(path: Path) -> Path:
    try:
        return path.relative_to(Path.cwd())
    except ValueError:
        return path


def _write_csv(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    print(f"✔️  Wrote {display_path(path)}")


def _event_rows(events) -> pd.DataFrame:
    columns = ['time_utc', 'magnitude', 'depth_km', 'latitude', 'longitude', 'place', 'felt_reports', 'reference_url']
    rows = [
        {
            'time_utc': pd.to_datetime(event.timestamp_ms, unit='ms', utc=True).strftime('%Y-%m-%dT%H:%M:%SZ'),
            'magnitude': event.magnitude,
            'depth_km': event.depth_km,
            'latitude': event.latitude,
            'longitude': event.longitude,
            'place': event.place,
            'felt_reports': event.felt_reports,
            'reference_url': event.reference_url,
        }
        for event in events
    ]
    return pd.DataFrame(rows, columns=columns)


# -----------------------------------------------------------------------------------------------
# Report frames


def events_df(catalog: SeismicCatalog) -> pd.DataFrame:
    return _event_rows(catalog.events)


def daily_counts_df(catalog: SeismicCatalog) -> pd.DataFrame:
    return pd.DataFrame(aggregate.daily_counts(catalog.events), columns=['date', 'count'])


def monthly_counts_df(catalog: SeismicCatalog) -> pd.DataFrame:
    return pd.DataFrame(aggregate.monthly_counts(catalog.events), columns=['month', 'count'])


def magnitude_bands_df(catalog: SeismicCatalog) -> pd.DataFrame:
    bands = aggregate.bucket_by_magnitude(catalog.events)
    return pd.DataFrame(list(bands.items()), columns=['band', 'count'])


def depth_bands_df(catalog: SeismicCatalog) -> pd.DataFrame:
    bands = aggregate.bucket_by_depth(catalog.events)
    return pd.DataFrame(list(bands.items()), columns=['band', 'count'])


def major_events_df(catalog: SeismicCatalog, min_magnitude: float = aggregate.STRONG_MAGNITUDE) -> pd.DataFrame:
    return _event_rows(aggregate.top_events(catalog.events, min_magnitude))


REPORTS: Dict[str, ReportBuilder] = {
    'events': events_df,
    'daily_counts': daily_counts_df,
    'monthly_counts': monthly_counts_df,
    'magnitude_bands': magnitude_bands_df,
    'depth_bands': depth_bands_df,
    'major_events': major_events_df,
}


def export_reports(
    catalog: SeismicCatalog,
    output_dir: Optional[Path] = None,
    min_magnitude: float = aggregate.STRONG_MAGNITUDE,
    keys=None,
) -> Dict[str, Path]:
    output_dir = Path(output_dir or OUTPUT_ROOT)
    builders = dict(REPORTS, major_events=partial(major_events_df, min_magnitude=min_magnitude))
    written: Dict[str, Path] = {}
    for key in keys or REPORTS:
        if key not in builders:
            print(f"Unknown report '{key}'. Available: {', '.join(builders)}", file=sys.stderr)
            continue
        path = output_dir / f'{key}.csv'
        _write_csv(builders[key](catalog), path)
        written[key] = path
    return written


def main() -> None:
    parser = argparse.ArgumentParser(description='Build reporting CSVs from an earthquake catalog.')
    parser.add_argument('report', nargs='*', help='Optional report keys (default: all)')
    parser.add_argument('--dataset', type=Path, default=None, help='GeoJSON or JS data file (default: $QUAKE_DATASET_FILE)')
    parser.add_argument('--output', type=Path, default=OUTPUT_ROOT, help='Directory for the CSV files')
    parser.add_argument('--source-crs', default=None, help='CRS of the catalog coordinates, e.g. EPSG:25832')
    parser.add_argument('--min-magnitude', type=float, default=aggregate.STRONG_MAGNITUDE, help='Threshold for major_events.csv')
    args = parser.parse_args()

    try:
        catalog = load_catalog(args.dataset, source_crs=args.source_crs or SOURCE_CRS)
    except (FileNotFoundError, DatasetError) as exc:
        print(f"❌ {exc}", file=sys.stderr)
        sys.exit(1)
    export_reports(catalog, args.output, args.min_magnitude, args.report or None)


if __name__ == '__main__':
    main()
