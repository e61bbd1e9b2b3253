"""Depth + intensity images -> organized XYZI point cloud."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional
import numpy as np
from depth_proc.core.camera_model import PinholeCameraModel
from depth_proc.core.encodings import decode_depth_frame, decode_intensity
from depth_proc.core.frame_types import (
    POINT_XYZI_DTYPE,
    CameraCalibration,
    ImageFrame,
    PointCloudFrame,
)
from depth_proc.core.resolution import reconcile

@dataclass(frozen=True)
class PointCloudConfig:
    # Message synchronization
    queue_size: int = 5
    slop: float = 0.02
    # Depth in meters written for missing samples before projection
    invalid_depth: float = 0.0

def frame_ids_match(depth: ImageFrame, intensity: ImageFrame) -> bool:
    return depth.frame_id == intensity.frame_id

def depth_to_xyzi(
    depth_m: np.ndarray,
    valid: np.ndarray,
    intensity: np.ndarray,
    model: PinholeCameraModel,
    invalid_depth: float = 0.0,
) -> np.ndarray:
    """Project every pixel into an HxW structured XYZI array.

    Invalid samples take ``invalid_depth`` and are projected like the rest, so
    the cloud stays organized and every record is defined.
    """
    depth_m = np.where(valid, depth_m, float(invalid_depth))
    x, y, z = model.project_image(depth_m)
    points = np.empty(depth_m.shape, dtype=POINT_XYZI_DTYPE)
    points["x"] = x
    points["y"] = y
    points["z"] = z
    points["intensity"] = intensity
    return points

class PointCloudXyziConverter:
    """Builds PointCloudFrames from synchronized depth, intensity and camera info.

    ``on_frame_mismatch(depth_frame_id, intensity_frame_id)`` is called when the
    two images disagree on their frame; conversion still goes ahead with the
    depth image metadata.
    """

    def __init__(
        self,
        cfg: PointCloudConfig = PointCloudConfig(),
        on_frame_mismatch: Optional[Callable[[str, str], None]] = None,
    ):
        self.cfg = cfg
        self.on_frame_mismatch = on_frame_mismatch

    def convert(
        self, depth: ImageFrame, intensity: ImageFrame, calib: CameraCalibration
    ) -> PointCloudFrame:
        if self.on_frame_mismatch is not None and not frame_ids_match(depth, intensity):
            self.on_frame_mismatch(depth.frame_id, intensity.frame_id)
        intensity, calib = reconcile(depth, intensity, calib)
        model = PinholeCameraModel.from_calibration(calib)
        depth_m, valid = decode_depth_frame(depth)
        intensity_f = decode_intensity(intensity)
        points = depth_to_xyzi(depth_m, valid, intensity_f, model, self.cfg.invalid_depth)
        # Use depth image time stamp and frame
        return PointCloudFrame(
            points=points,
            stamp_ns=depth.stamp_ns,
            frame_id=depth.frame_id,
            is_dense=False,
        )
