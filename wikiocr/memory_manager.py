#!/usr/bin/env python3
"""
Memory Management Module

Memory usage monitoring for OCR work. Recognition models and decoded images
are large, so the engine can be given an optional ceiling that is checked
before and after each recognition call.
"""

import gc
import logging
import os
from contextlib import contextmanager
from typing import Optional

import psutil

from .exceptions import MemoryLimitExceededError

logger = logging.getLogger(__name__)


class MemoryManager:
    """
    Memory management utility for OCR operations.

    Provides memory monitoring, limits, and cleanup functionality.
    """

    def __init__(self, memory_limit_mb: Optional[int] = None):
        """
        Initialize memory manager.

        Args:
            memory_limit_mb: Memory limit in MB, None for no limit
        """
        self.memory_limit_mb = memory_limit_mb
        self.process = psutil.Process(os.getpid())

    def get_memory_usage(self) -> float:
        """Return the resident set size of this process in MB."""
        try:
            return self.process.memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            logger.warning(f"Failed to get memory usage: {e}")
            return 0.0

    def check_memory_limit(self, operation: str = "operation") -> None:
        """
        Check if memory usage exceeds limit.

        Args:
            operation: Description of current operation

        Raises:
            MemoryLimitExceededError: If memory limit exceeded
        """
        if self.memory_limit_mb is None:
            return

        current_usage = self.get_memory_usage()
        if current_usage > self.memory_limit_mb:
            raise MemoryLimitExceededError(
                operation=operation,
                memory_used=int(current_usage),
                memory_limit=self.memory_limit_mb
            )

    @contextmanager
    def memory_context(self, operation: str = "operation"):
        """
        Context manager for memory-monitored operations.

        The end-of-operation check is skipped when the body raises.
        """
        self.check_memory_limit(f"start of {operation}")
        yield
        if self.memory_limit_mb is not None:
            gc.collect()
        self.check_memory_limit(f"end of {operation}")
