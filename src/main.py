"""Command line entry point for the airflow precompute pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from domain.documents import (
    BuildingDocument,
    StationDocument,
    load_document,
    save_document,
)
from domain.models import FlowSettings
from domain.profiles import load_profile
from services.batch import run_batch
from services.interpolation_service import InterpolationService

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(*, verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure root logging: stdout always, a UTF-8 file when requested."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Airflow precompute - streamlines and sensor fields'
    )
    parser.add_argument('--profile', help='Имя профиля или путь к TOML файлу')
    parser.add_argument('--log-file', type=Path, help='Дублировать лог в файл')
    parser.add_argument('--verbose', '-v', action='store_true', help='DEBUG логирование')
    sub = parser.add_subparsers(dest='command', required=True)

    sl = sub.add_parser('streamlines', help='Streamlines for planning areas')
    sl.add_argument('areas', nargs='+', metavar='AREA')
    sl.add_argument('--buildings-dir', type=Path, default=Path('public/buildings'))
    sl.add_argument('--output-dir', type=Path, default=Path('public/streamlines'))

    ip = sub.add_parser('interpolate', help='IDW estimate of station readings')
    ip.add_argument('stations', type=Path, metavar='STATIONS')
    ip.add_argument('buildings', type=Path, metavar='BUILDINGS')
    mode = ip.add_mutually_exclusive_group(required=True)
    mode.add_argument('--grid', action='store_true', help='Grid over the area frame')
    mode.add_argument('--lat', type=float)
    ip.add_argument('--lng', type=float)
    ip.add_argument('--size', type=int, help='Grid size (nodes per axis)')
    ip.add_argument('--output', '-o', type=Path, help='Where to write the grid JSON')
    return parser


def _run_streamlines(args: argparse.Namespace, settings: FlowSettings) -> int:
    summary = run_batch(args.areas, args.buildings_dir, args.output_dir, settings)
    return 0 if summary.failed == 0 else 1


def _run_interpolate(args: argparse.Namespace, settings: FlowSettings) -> int:
    stations = load_document(args.stations, StationDocument)
    frame = load_document(args.buildings, BuildingDocument).frame()
    service = InterpolationService(settings)

    if not args.grid:
        value = service.point(stations, frame, args.lat, args.lng)
        if value is None:
            logger.error('%s: no station readings', stations.variable)
            return 1
        print(value)
        return 0

    grid = service.grid(stations, frame, args.size)
    if grid is None:
        logger.error('%s: no station readings', stations.variable)
        return 1
    if args.output:
        save_document(args.output, grid)
        logger.info('Grid saved to %s', args.output)
    else:
        print(grid.model_dump_json(by_alias=True, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == 'interpolate' and args.lat is not None and args.lng is None:
        parser.error('--lat requires --lng')

    setup_logging(verbose=args.verbose, log_file=args.log_file)
    try:
        settings = load_profile(args.profile) if args.profile else FlowSettings()
        if args.command == 'streamlines':
            return _run_streamlines(args, settings)
        return _run_interpolate(args, settings)
    except (FileNotFoundError, ValueError) as e:
        logger.error('%s', e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
