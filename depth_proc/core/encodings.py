"""Encoding-aware decoding of depth and intensity images.

Depth images come in two storage encodings:

* ``16UC1`` - unsigned 16-bit integer millimeters, 0 marks a missing sample.
* ``32FC1`` - 32-bit float meters, NaN/Inf or non-positive values are missing.

Each supported encoding maps to its decode function in ``DEPTH_DECODERS``,
so supporting a new encoding means adding one row there.
"""

from typing import Callable, Dict, Tuple
import numpy as np
from depth_proc.core.errors import UnsupportedEncoding

MONO8 = "mono8"
MONO16 = "mono16"
TYPE_8UC1 = "8UC1"
TYPE_16UC1 = "16UC1"
TYPE_32FC1 = "32FC1"

# Encodings the point cloud can store as intensity without conversion
INTENSITY_ENCODINGS = (MONO8, MONO16, TYPE_16UC1, TYPE_32FC1)

def _decode_millimeters(raw) -> Tuple[np.ndarray, np.ndarray]:
    raw = np.asarray(raw)
    return raw.astype(np.float64) * 0.001, raw != 0

def _decode_meters(raw) -> Tuple[np.ndarray, np.ndarray]:
    raw = np.asarray(raw, dtype=np.float64)
    with np.errstate(invalid="ignore"):
        valid = np.isfinite(raw) & (raw > 0.0)
    return raw, valid

DEPTH_DECODERS: Dict[str, Callable[..., Tuple[np.ndarray, np.ndarray]]] = {
    TYPE_16UC1: _decode_millimeters,
    TYPE_32FC1: _decode_meters,
}

def decode_depth(raw, encoding: str) -> Tuple[np.ndarray, np.ndarray]:
    """Convert raw samples to (metric depth in meters, validity mask).

    ``raw`` may be a scalar or an array; the result has the same shape.
    Invalid samples keep their converted value, callers must consult the mask.
    """
    try:
        decode = DEPTH_DECODERS[encoding]
    except KeyError:
        raise UnsupportedEncoding(encoding, role="Depth image") from None
    return decode(raw)

def decode_depth_frame(frame) -> Tuple[np.ndarray, np.ndarray]:
    """Decode a whole depth ImageFrame."""
    return decode_depth(frame.image, frame.encoding)

def decode_intensity(frame) -> np.ndarray:
    """Return the intensity channel of an ImageFrame as float32 (h, w)."""
    if frame.encoding not in INTENSITY_ENCODINGS:
        raise UnsupportedEncoding(frame.encoding, role="Intensity image")
    return np.asarray(frame.image, dtype=np.float32)
