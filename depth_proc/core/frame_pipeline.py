"""Per-tuple decode -> convert -> publish step run by the node callbacks."""

from __future__ import annotations
from typing import Any, Callable
from depth_proc.core.errors import DepthProcError

class FramePipeline:
    """Runs one synchronized tuple through decode, convert and publish.

    A ``DepthProcError`` from decode or convert drops only that tuple: it is
    logged through ``logger.error`` and the next tuple is processed normally.
    """

    def __init__(
        self,
        decode: Callable[..., tuple],
        convert: Callable[..., Any],
        publish: Callable[[Any], None],
        logger,
        tag: str,
    ):
        self.decode = decode
        self.convert = convert
        self.publish = publish
        self.logger = logger
        self.tag = tag

    def __call__(self, *msgs) -> bool:
        """Process one tuple; returns True if an output was published."""
        try:
            frames = self.decode(*msgs)
            result = self.convert(*frames)
        except DepthProcError as e:
            self.logger.error(f"[{self.tag}] drop frame: {e}")
            return False
        self.publish(result)
        return True
