"""Streamline precompute for one area - orchestrates frame, obstacles and tracing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.documents import (
    BuildingDocument,
    StreamlineDocument,
    load_document,
    save_document,
)
from domain.models import FlowSettings
from flow.seeds import StreamlineGenerator
from geo.projection import check_alignment, measure_distortion
from shared.constants import PLANAR_DISTORTION_WARN_RATIO

if TYPE_CHECKING:
    from pathlib import Path

    from geo.obstacles import ObstacleIndex
    from geo.projection import AreaFrame

logger = logging.getLogger(__name__)


class StreamlineService:
    """Builds the streamline artifact of an area from its building document."""

    def __init__(self, settings: FlowSettings | None = None) -> None:
        self.settings = settings or FlowSettings()
        self.generator = StreamlineGenerator.from_settings(self.settings)

    def _check_frame(
        self, area_id: str, frame: AreaFrame, obstacles: ObstacleIndex
    ) -> None:
        distortion = measure_distortion(frame)
        if distortion.max_error > PLANAR_DISTORTION_WARN_RATIO:
            logger.warning(
                'Area %s: planar frame deviates from WGS84 by %.1f%%',
                area_id,
                distortion.max_error * 100,
            )
        if obstacles.bounds is None:
            return
        report = check_alignment(frame, obstacles.bounds)
        if not report.aligned:
            logger.warning(
                'Area %s: footprints look projected under another origin '
                '(offset x=%.1f z=%.1f, outside=%.0f%%)',
                area_id,
                report.offset_x,
                report.offset_z,
                report.outside_ratio * 100,
            )

    def run(self, document: BuildingDocument) -> StreamlineDocument:
        """
        Trace streamlines around the buildings of one area.

        Args:
            document: Building document with footprints and rendered bounds

        Returns:
            StreamlineDocument ready to be saved

        Raises:
            MalformedDocumentError: If the document has no usable frame

        """
        frame = document.frame()
        obstacles = document.obstacles()
        if obstacles.skipped:
            logger.warning(
                'Area %s: skipped %d degenerate footprints',
                document.area_id,
                obstacles.skipped,
            )
        self._check_frame(document.area_id, frame, obstacles)

        bounds = obstacles.bounds or frame.bounds
        streamlines, stats = self.generator.generate_with_stats(obstacles, bounds)
        logger.info(
            'Area %s: %d buildings, %d seeds traced (%d inside buildings), %d streamlines kept',
            document.area_id,
            len(obstacles),
            stats.traced,
            stats.inside_obstacles,
            stats.kept,
        )
        return StreamlineDocument.from_streamlines(
            document.area_id, streamlines, self.settings.precision
        )

    def run_file(self, input_path: str | Path, output_path: str | Path) -> StreamlineDocument:
        document = load_document(input_path, BuildingDocument)
        result = self.run(document)
        saved = save_document(output_path, result)
        logger.info('Saved %d streamlines to %s', result.streamline_count, saved)
        return result
