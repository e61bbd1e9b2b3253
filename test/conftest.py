"""
Pytest configuration file
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def make_calibration():
    """Factory for CameraCalibration with a pinhole K and stereo P"""
    from depth_proc.core.frame_types import CameraCalibration

    def _make(fx=500.0, fy=None, cx=0.0, cy=0.0, width=640, height=480, baseline=0.0):
        fy = fx if fy is None else fy
        k = (fx, 0.0, cx, 0.0, fy, cy, 0.0, 0.0, 1.0)
        p = (fx, 0.0, cx, -fx * baseline, 0.0, fy, cy, 0.0, 0.0, 0.0, 1.0, 0.0)
        return CameraCalibration(k=k, p=p, width=width, height=height, frame_id="camera")

    return _make


@pytest.fixture
def make_frame():
    """Factory wrapping a numpy image in an ImageFrame"""
    from depth_proc.core.frame_types import ImageFrame

    def _make(array, encoding, stamp_ns=1_000_000_000, frame_id="camera"):
        return ImageFrame(image=np.asarray(array), encoding=encoding, stamp_ns=stamp_ns, frame_id=frame_id)

    return _make


@pytest.fixture
def depth_mm():
    """3x4 16UC1 depth image in millimeters with two missing samples"""
    return np.array(
        [
            [1000, 2000, 0, 1500],
            [500, 4000, 2500, 0],
            [1000, 1000, 1000, 1000],
        ],
        dtype=np.uint16,
    )
