"""Tests for services.batch."""

import json
import logging

from domain.documents import StreamlineDocument, load_document, save_document
from services.batch import run_batch


class TestRunBatch:
    """Batch precompute keeps going past failing areas."""

    def test_continues_after_failures(self, tmp_path, fast_settings, building_data, caplog):
        buildings_dir = tmp_path / 'buildings'
        output_dir = tmp_path / 'streamlines'
        buildings_dir.mkdir()
        (buildings_dir / 'clementi.json').write_text(
            json.dumps(building_data), encoding='utf-8'
        )
        broken = dict(building_data, areaId='broken')
        broken.pop('metadata')
        (buildings_dir / 'broken.json').write_text(
            json.dumps(broken), encoding='utf-8'
        )

        with caplog.at_level(logging.INFO):
            summary = run_batch(
                ['broken', 'missing', 'clementi'], buildings_dir, output_dir, fast_settings
            )

        assert summary.succeeded == 1
        assert summary.failed == 2
        assert summary.processed == 3
        assert summary.failed_areas == ['broken', 'missing']
        result = load_document(output_dir / 'clementi.json', StreamlineDocument)
        assert summary.total_streamlines == result.streamline_count > 0
        assert not (output_dir / 'broken.json').exists()
        assert 'Area broken failed' in caplog.text
        assert 'Memory usage (after clementi)' in caplog.text
        assert 'Thread status (batch end)' in caplog.text

    def test_empty_batch(self, tmp_path):
        summary = run_batch([], tmp_path / 'in', tmp_path / 'out')
        assert summary.processed == 0
        assert (tmp_path / 'out').is_dir()

    def test_reads_saved_documents(self, tmp_path, fast_settings, building_document):
        save_document(tmp_path / 'in' / 'clementi.json', building_document)
        summary = run_batch(['clementi'], tmp_path / 'in', tmp_path / 'out', fast_settings)
        assert summary.succeeded == 1
        assert summary.failed_areas == []
