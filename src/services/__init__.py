"""Services layer - orchestration of the precompute pipeline."""
from services.batch import BatchSummary, run_batch
from services.interpolation_service import InterpolationService
from services.streamline_service import StreamlineService

__all__ = [
    'BatchSummary',
    'InterpolationService',
    'StreamlineService',
    'run_batch',
]
