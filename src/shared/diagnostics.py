"""
Resource diagnostics for long precompute runs.

A batch processes many areas in one process; memory snapshots between areas
make leaks visible in the log.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import psutil

if TYPE_CHECKING:
    import types

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


@dataclass(frozen=True)
class MemorySnapshot:
    rss_mb: float
    vms_mb: float
    total_mb: float
    available_mb: float
    used_percent: float

    @classmethod
    def capture(cls) -> MemorySnapshot:
        """
        Read current process and system memory.

        Raises:
            psutil.Error: If the process cannot be inspected

        """
        mem = psutil.Process().memory_info()
        vm = psutil.virtual_memory()
        return cls(
            rss_mb=round(mem.rss / _MB, 2),
            vms_mb=round(mem.vms / _MB, 2),
            total_mb=round(vm.total / _MB, 2),
            available_mb=round(vm.available / _MB, 2),
            used_percent=vm.percent,
        )


def get_memory_info() -> dict[str, Any]:
    """Memory snapshot as a flat dict; ``{'error': ...}`` if psutil fails."""
    try:
        snap = MemorySnapshot.capture()
    except psutil.Error as e:
        return {'error': f'Failed to get memory info: {e}'}
    return {
        'process_rss_mb': snap.rss_mb,
        'process_vms_mb': snap.vms_mb,
        'system_total_mb': snap.total_mb,
        'system_available_mb': snap.available_mb,
        'system_used_percent': snap.used_percent,
    }


def get_thread_info() -> dict[str, Any]:
    names = [t.name for t in threading.enumerate()]
    info: dict[str, Any] = {'active_count': len(names), 'thread_names': names}
    try:
        info['system_threads'] = psutil.Process().num_threads()
    except psutil.Error as e:
        logger.debug('System thread count unavailable: %s', e)
    return info


def log_memory_usage(stage: str = '') -> None:
    info = get_memory_info()
    suffix = f' ({stage})' if stage else ''
    logger.info(
        'Memory usage%s: RSS=%sMB, Available=%sMB',
        suffix,
        info.get('process_rss_mb', 'N/A'),
        info.get('system_available_mb', 'N/A'),
    )


def log_thread_status(stage: str = '') -> None:
    info = get_thread_info()
    suffix = f' ({stage})' if stage else ''
    logger.info(
        'Thread status%s: Active=%s, System=%s',
        suffix,
        info['active_count'],
        info.get('system_threads', 'N/A'),
    )


class ResourceMonitor:
    """Logs how long a block took and how much RSS it added."""

    def __init__(self, operation_name: str) -> None:
        self.operation_name = operation_name
        self.duration: float | None = None
        self._started: float | None = None
        self._rss_before: Any = None

    def __enter__(self) -> ResourceMonitor:
        self._started = time.perf_counter()
        self._rss_before = get_memory_info().get('process_rss_mb')
        logger.debug("Operation '%s' started", self.operation_name)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        if self._started is None:
            msg = 'ResourceMonitor exited without being entered'
            raise RuntimeError(msg)
        self.duration = time.perf_counter() - self._started
        if exc_type is not None:
            logger.error(
                "Operation '%s' failed after %.2fs with %s: %s",
                self.operation_name,
                self.duration,
                exc_type.__name__,
                exc_val,
            )
            return
        rss_after = get_memory_info().get('process_rss_mb')
        if isinstance(rss_after, float) and isinstance(self._rss_before, float):
            growth = f'{rss_after - self._rss_before:+.2f}MB'
        else:
            growth = 'N/A'
        logger.info(
            "Operation '%s' completed in %.2fs, RSS %s",
            self.operation_name,
            self.duration,
            growth,
        )
