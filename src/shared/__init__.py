"""Shared utilities and helpers."""
from shared.diagnostics import (
    ResourceMonitor,
    get_memory_info,
    log_memory_usage,
    log_thread_status,
)

__all__ = [
    'ResourceMonitor',
    'get_memory_info',
    'log_memory_usage',
    'log_thread_status',
]
