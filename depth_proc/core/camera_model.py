"""Pinhole camera model built from a CameraCalibration."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np
from depth_proc.core.errors import InvalidCalibration
from depth_proc.core.frame_types import CameraCalibration

@dataclass(frozen=True)
class PinholeCameraModel:
    """Camera intrinsic parameters plus the baseline-bearing projection terms."""
    fx: float
    fy: float
    cx: float
    cy: float
    p0: float  # P[0], focal length of the rectified projection
    p3: float  # P[3] = -fx' * Tx
    width: int
    height: int

    @classmethod
    def from_calibration(cls, calib: CameraCalibration) -> "PinholeCameraModel":
        return cls(
            fx=calib.fx,
            fy=calib.fy,
            cx=calib.cx,
            cy=calib.cy,
            p0=float(calib.p[0]),
            p3=float(calib.p[3]),
            width=int(calib.width),
            height=int(calib.height),
        )

    @property
    def focal_length(self) -> float:
        if self.p0 == 0.0:
            raise InvalidCalibration("projection matrix has P[0] == 0")
        return self.p0

    @property
    def baseline(self) -> float:
        """Stereo baseline in meters, t = -P[3] / P[0]."""
        return -self.p3 / self.focal_length

    def project(self, u, v, depth):
        """Back-project pixel (u, v) at metric depth to a camera-frame point.

        Accepts scalars or broadcastable arrays. Invalid depth is not filtered
        here, NaN or a sentinel simply propagates into the result.
        """
        x = (u - self.cx) * depth / self.fx
        y = (v - self.cy) * depth / self.fy
        return x, y, depth

    def project_image(self, depth_m: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Project an HxW metric depth image, returns float32 X, Y, Z arrays."""
        if self.fx == 0.0 or self.fy == 0.0:
            raise InvalidCalibration(f"degenerate focal length fx={self.fx} fy={self.fy}")
        h, w = depth_m.shape
        us = np.arange(w, dtype=np.float64)[None, :]
        vs = np.arange(h, dtype=np.float64)[:, None]
        x, y, z = self.project(us, vs, depth_m)
        return (
            np.asarray(x, dtype=np.float32),
            np.asarray(y, dtype=np.float32),
            np.asarray(z, dtype=np.float32),
        )
