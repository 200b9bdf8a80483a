# biome_renderer/buffer.py

"""
================================================================================
PIXEL BUFFER
================================================================================
A single owned, reusable output buffer with grow-only reallocation.

Lifecycle:
    - Allocated on first use.
    - On each request, replaced by a buffer of exactly the requested size if
      the request exceeds the current capacity; reused in place otherwise.
    - Never shrunk. Contents are overwritten, not cleared, before each render.

Views handed out by `view()` and `pixels()` borrow the current allocation.
They stay attached to the data they were taken from, but only reflect new
renders until the next request that forces growth.
================================================================================
"""
import logging

import numpy as np

from . import config as DEFAULTS


class PixelBuffer:
    """Grow-only RGBA8888 byte buffer with explicit capacity tracking."""
    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self._data = None
        self.size = 0
        self.reallocations = 0

    @property
    def capacity(self) -> int:
        return len(self._data) if self._data is not None else 0

    def reserve(self, nbytes: int) -> bool:
        """
        Ensures at least `nbytes` of capacity. Returns False, leaving the
        buffer empty, if the allocation fails.
        """
        if self._data is not None and nbytes <= self.capacity:
            self.size = nbytes
            return True

        old_capacity = self.capacity
        self._data = None
        self.size = 0
        try:
            self._data = bytearray(nbytes)
        except (MemoryError, OverflowError):
            self.logger.error(f"Failed to allocate a {nbytes}-byte pixel buffer.")
            return False

        self.size = nbytes
        self.reallocations += 1
        self.logger.debug(f"Pixel buffer grown from {old_capacity} to {nbytes} bytes.")
        return True

    def view(self) -> memoryview | None:
        """The whole current allocation, or None if nothing is allocated."""
        if self._data is None:
            return None
        return memoryview(self._data)

    def pixels(self, width: int, height: int) -> np.ndarray:
        """A writable (height, width, 4) uint8 view over the buffer's first bytes."""
        count = width * height * DEFAULTS.BYTES_PER_PIXEL
        flat = np.frombuffer(self._data, dtype=np.uint8, count=count)
        return flat.reshape(height, width, DEFAULTS.BYTES_PER_PIXEL)
