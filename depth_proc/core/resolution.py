"""Match an intensity image to the depth image it is paired with.

Depth and intensity cameras often stream at different resolutions. The
intensity image is cropped/resized onto the depth pixel grid and a scaled
copy of the calibration is returned, the input calibration is left as is.
"""

from dataclasses import replace
from typing import Tuple
import cv2
from depth_proc.core.errors import CompanionConversionFailed
from depth_proc.core.frame_types import CameraCalibration, ImageFrame

def resolution_matches(depth: ImageFrame, companion: ImageFrame) -> bool:
    return depth.width == companion.width and depth.height == companion.height

def resize_to_depth(depth: ImageFrame, companion: ImageFrame) -> ImageFrame:
    """Resample the companion image onto the depth image's pixel grid.

    Rows beyond depth.height / ratio are cropped first so a companion with a
    taller aspect ratio is not squashed.
    """
    if companion.width == 0:
        raise CompanionConversionFailed("intensity image has zero width")
    ratio = depth.width / companion.width
    rows = min(int(depth.height / ratio), companion.height)
    try:
        resized = cv2.resize(companion.image[:rows], (depth.width, depth.height))
    except cv2.error as e:
        raise CompanionConversionFailed(f"resize to {depth.width}x{depth.height} failed: {e}") from e
    return replace(companion, image=resized)

def reconcile(
    depth: ImageFrame, companion: ImageFrame, calib: CameraCalibration
) -> Tuple[ImageFrame, CameraCalibration]:
    """Return (companion, calibration) expressed at the depth image resolution."""
    if resolution_matches(depth, companion):
        return companion, calib
    resized = resize_to_depth(depth, companion)
    ratio = depth.width / companion.width
    return resized, calib.scaled(ratio, depth.width, depth.height)
