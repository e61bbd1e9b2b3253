"""Depth image -> disparity image conversion."""

from __future__ import annotations
from dataclasses import dataclass
import math
import numpy as np
from depth_proc.core.camera_model import PinholeCameraModel
from depth_proc.core.encodings import decode_depth_frame
from depth_proc.core.frame_types import CameraCalibration, DisparityFrame, ImageFrame

@dataclass(frozen=True)
class DisparityConfig:
    # Message synchronization
    queue_size: int = 5
    # Range bounds reported in the output, in meters
    min_range: float = 0.0
    max_range: float = math.inf
    # Disparity resolution reported in the output
    delta_d: float = 0.125

def _ieee_div(num: float, den: float) -> float:
    """num / den with IEEE-754 results for den == 0 instead of ZeroDivisionError."""
    if den == 0.0:
        if num == 0.0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den

def depth_to_disparity(depth_m: np.ndarray, valid: np.ndarray, f: float, t: float) -> np.ndarray:
    """For each valid depth Z, d = f*t / Z; invalid pixels stay 0."""
    disparity = np.zeros(depth_m.shape, dtype=np.float32)
    constant = f * t
    disparity[valid] = (constant / depth_m[valid]).astype(np.float32)
    return disparity

class DisparityConverter:
    """Builds DisparityFrames from depth images and the matching camera info."""

    def __init__(self, cfg: DisparityConfig = DisparityConfig()):
        self.cfg = cfg

    def disparity_bounds(self, f: float, t: float):
        """(min_disparity, max_disparity) for the configured range bounds."""
        ft = f * t
        return (
            _ieee_div(ft, float(self.cfg.max_range)),
            _ieee_div(ft, float(self.cfg.min_range)),
        )

    def convert(self, depth: ImageFrame, calib: CameraCalibration) -> DisparityFrame:
        model = PinholeCameraModel.from_calibration(calib)
        f = model.focal_length
        t = model.baseline
        depth_m, valid = decode_depth_frame(depth)
        min_d, max_d = self.disparity_bounds(f, t)
        return DisparityFrame(
            image=depth_to_disparity(depth_m, valid, f, t),
            f=f,
            t=t,
            min_disparity=min_d,
            max_disparity=max_d,
            delta_d=float(self.cfg.delta_d),
            stamp_ns=depth.stamp_ns,
            frame_id=depth.frame_id,
        )
