"""
Batch precompute over many planning areas.

Each area is read from ``<buildings_dir>/<area_id>.json`` and written to
``<output_dir>/<area_id>.json``. A failing area is logged and counted; the
batch always goes on with the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from services.streamline_service import StreamlineService
from shared.diagnostics import ResourceMonitor, log_memory_usage, log_thread_status

if TYPE_CHECKING:
    from collections.abc import Iterable

    from domain.models import FlowSettings

logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    succeeded: int = 0
    failed: int = 0
    total_streamlines: int = 0
    failed_areas: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.succeeded + self.failed


def run_batch(
    area_ids: Iterable[str],
    buildings_dir: str | Path,
    output_dir: str | Path,
    settings: FlowSettings | None = None,
) -> BatchSummary:
    """
    Generate streamline artifacts for every area id.

    Args:
        area_ids: Planning area identifiers
        buildings_dir: Directory with building documents
        output_dir: Directory for streamline documents (created if missing)
        settings: Run settings; defaults when None

    Returns:
        BatchSummary with success and failure counts

    """
    service = StreamlineService(settings)
    buildings_dir = Path(buildings_dir)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    summary = BatchSummary()
    areas = list(area_ids)
    logger.info('Batch started: %d areas', len(areas))
    for i, area_id in enumerate(areas, start=1):
        logger.info('[%d/%d] %s', i, len(areas), area_id)
        input_path = buildings_dir / f'{area_id}.json'
        if not input_path.exists():
            logger.warning('Area %s: no building data at %s', area_id, input_path)
            summary.failed += 1
            summary.failed_areas.append(area_id)
            continue
        try:
            with ResourceMonitor(f'streamlines {area_id}'):
                result = service.run_file(input_path, output_dir / f'{area_id}.json')
        except Exception:
            logger.exception('Area %s failed', area_id)
            summary.failed += 1
            summary.failed_areas.append(area_id)
        else:
            summary.succeeded += 1
            summary.total_streamlines += result.streamline_count
        log_memory_usage(f'after {area_id}')

    logger.info(
        'Batch complete: %d succeeded, %d failed, %d streamlines',
        summary.succeeded,
        summary.failed,
        summary.total_streamlines,
    )
    log_thread_status('batch end')
    return summary
