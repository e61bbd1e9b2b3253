# depth_proc/core/frame_types.py
from dataclasses import dataclass, field
from typing import List, Tuple
import numpy as np
from depth_proc.core.errors import InvalidFrame

@dataclass
class ImageFrame:
    """Decoded image (depth or intensity) with its header."""
    # Image data, (h, w) or (h, w, c) in native byte order
    image: np.ndarray
    encoding: str
    # Timing and coordinate frame
    stamp_ns: int = 0
    frame_id: str = ""

    def __post_init__(self) -> None:
        if self.image.ndim not in (2, 3):
            raise InvalidFrame(f"expected a 2D image, got shape {self.image.shape}")

    @property
    def stamp(self) -> float:
        return self.stamp_ns * 1e-9

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

@dataclass(frozen=True)
class CameraCalibration:
    """Camera intrinsics as carried by a calibration message."""
    k: Tuple[float, ...]  # 3x3 row-major
    p: Tuple[float, ...]  # 3x4 row-major
    width: int
    height: int
    stamp_ns: int = 0
    frame_id: str = ""

    def __post_init__(self) -> None:
        if len(self.k) != 9 or len(self.p) != 12:
            raise ValueError("k must have 9 entries and p must have 12")

    @property
    def fx(self) -> float:
        return float(self.k[0])

    @property
    def fy(self) -> float:
        return float(self.k[4])

    @property
    def cx(self) -> float:
        return float(self.k[2])

    @property
    def cy(self) -> float:
        return float(self.k[5])

    def scaled(self, ratio: float, width: int, height: int) -> "CameraCalibration":
        """Copy with the resolution-dependent K and P entries multiplied by ratio."""
        k = list(self.k)
        p = list(self.p)
        for i in (0, 2, 4, 5):
            k[i] *= ratio
        for i in (0, 2, 5, 6):
            p[i] *= ratio
        return CameraCalibration(
            k=tuple(k),
            p=tuple(p),
            width=int(width),
            height=int(height),
            stamp_ns=self.stamp_ns,
            frame_id=self.frame_id,
        )

@dataclass
class DisparityFrame:
    """Disparity image with the stereo parameters needed to interpret it."""
    image: np.ndarray  # HxW float32
    f: float
    t: float
    min_disparity: float
    max_disparity: float
    delta_d: float
    stamp_ns: int = 0
    frame_id: str = ""

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

POINT_XYZI_DTYPE = np.dtype(
    [("x", "<f4"), ("y", "<f4"), ("z", "<f4"), ("intensity", "<f4")]
)

# (name, byte offset, PointField datatype, count); 7 == PointField.FLOAT32
POINT_XYZI_FIELDS: List[Tuple[str, int, int, int]] = [
    ("x", 0, 7, 1),
    ("y", 4, 7, 1),
    ("z", 8, 7, 1),
    ("intensity", 12, 7, 1),
]

@dataclass
class PointCloudFrame:
    """Organized XYZI cloud, one record per depth pixel."""
    points: np.ndarray  # HxW structured array of POINT_XYZI_DTYPE
    stamp_ns: int = 0
    frame_id: str = ""
    is_dense: bool = False
    is_bigendian: bool = False
    fields: List[Tuple[str, int, int, int]] = field(default_factory=lambda: list(POINT_XYZI_FIELDS))

    @property
    def height(self) -> int:
        return int(self.points.shape[0])

    @property
    def width(self) -> int:
        return int(self.points.shape[1])

    @property
    def point_step(self) -> int:
        return POINT_XYZI_DTYPE.itemsize

    @property
    def row_step(self) -> int:
        return self.point_step * self.width

    def tobytes(self) -> bytes:
        return np.ascontiguousarray(self.points, dtype=POINT_XYZI_DTYPE).tobytes()
