#!/usr/bin/env python3
"""Conversions between ROS messages and depth_proc frames."""

from typing import Optional
import numpy as np
from builtin_interfaces.msg import Time as TimeMsg
from cv_bridge import CvBridge, CvBridgeError
from sensor_msgs.msg import CameraInfo, Image, PointCloud2, PointField
from std_msgs.msg import Header
from stereo_msgs.msg import DisparityImage
from depth_proc.core.encodings import INTENSITY_ENCODINGS, MONO8, TYPE_8UC1, TYPE_32FC1
from depth_proc.core.errors import InvalidFrame, UnsupportedEncoding
from depth_proc.core.frame_types import (
    CameraCalibration,
    DisparityFrame,
    ImageFrame,
    PointCloudFrame,
)

def stamp_to_ns(stamp: TimeMsg) -> int:
    return int(stamp.sec) * 1_000_000_000 + int(stamp.nanosec)

def ns_to_stamp(stamp_ns: int) -> TimeMsg:
    sec, nanosec = divmod(int(stamp_ns), 1_000_000_000)
    return TimeMsg(sec=sec, nanosec=nanosec)

def make_header(stamp_ns: int, frame_id: str) -> Header:
    header = Header()
    header.stamp = ns_to_stamp(stamp_ns)
    header.frame_id = frame_id
    return header

def image_from_msg(
    msg: Image,
    bridge: CvBridge,
    desired_encoding: str = "passthrough",
    role: str = "image",
) -> ImageFrame:
    """Decode a sensor_msgs/Image with cv_bridge (row step and byte order handled there)."""
    try:
        image = bridge.imgmsg_to_cv2(msg, desired_encoding=desired_encoding)
    except CvBridgeError as e:
        raise UnsupportedEncoding(msg.encoding, role=role) from e
    except (TypeError, ValueError) as e:
        raise InvalidFrame(f"{role} buffer does not match {msg.width}x{msg.height} step {msg.step}: {e}") from e
    image = np.asarray(image)
    if not image.dtype.isnative:
        # big-endian sources come back byte-swapped but with a non-native dtype
        image = image.astype(image.dtype.newbyteorder("="))
    encoding = msg.encoding if desired_encoding == "passthrough" else desired_encoding
    return ImageFrame(
        image=image,
        encoding=encoding,
        stamp_ns=stamp_to_ns(msg.header.stamp),
        frame_id=str(msg.header.frame_id),
    )

def depth_from_msg(msg: Image, bridge: CvBridge) -> ImageFrame:
    return image_from_msg(msg, bridge, role="Depth image")

def intensity_from_msg(msg: Image, bridge: CvBridge) -> ImageFrame:
    """Decode an intensity image, converting unsupported encodings to mono8."""
    if msg.encoding in INTENSITY_ENCODINGS:
        return image_from_msg(msg, bridge, role="Intensity image")
    if msg.encoding == TYPE_8UC1:
        frame = image_from_msg(msg, bridge, role="Intensity image")
        frame.encoding = MONO8
        return frame
    # Colour (8 or 16 bit) is converted and scaled to mono8 by cv_bridge
    return image_from_msg(msg, bridge, desired_encoding=MONO8, role="Intensity image")

def calibration_from_msg(msg: CameraInfo) -> CameraCalibration:
    return CameraCalibration(
        k=tuple(float(v) for v in msg.k),
        p=tuple(float(v) for v in msg.p),
        width=int(msg.width),
        height=int(msg.height),
        stamp_ns=stamp_to_ns(msg.header.stamp),
        frame_id=str(msg.header.frame_id),
    )

def disparity_to_msg(frame: DisparityFrame, bridge: Optional[CvBridge] = None) -> DisparityImage:
    """Pack a DisparityFrame into stereo_msgs/DisparityImage (32FC1 image)."""
    bridge = bridge or CvBridge()
    out = DisparityImage()
    out.header = make_header(frame.stamp_ns, frame.frame_id)
    out.image = bridge.cv2_to_imgmsg(
        np.ascontiguousarray(frame.image, dtype=np.float32), encoding=TYPE_32FC1, header=out.header
    )
    out.f = float(frame.f)
    out.t = float(frame.t)
    out.min_disparity = float(frame.min_disparity)
    out.max_disparity = float(frame.max_disparity)
    out.delta_d = float(frame.delta_d)
    return out

def cloud_to_msg(frame: PointCloudFrame) -> PointCloud2:
    """Pack an organized XYZI PointCloudFrame into a PointCloud2 message."""
    cloud = PointCloud2()
    cloud.header = make_header(frame.stamp_ns, frame.frame_id)
    cloud.height = frame.height
    cloud.width = frame.width
    cloud.is_bigendian = False
    cloud.is_dense = bool(frame.is_dense)

    # x, y, z, intensity (float32)
    cloud.fields = [
        PointField(name=name, offset=offset, datatype=datatype, count=count)
        for name, offset, datatype, count in frame.fields
    ]

    cloud.point_step = frame.point_step
    cloud.row_step = frame.row_step
    cloud.data = frame.tobytes()

    return cloud
