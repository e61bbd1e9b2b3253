"""Tests for ROS message <-> frame conversion"""

import numpy as np
import pytest

pytest.importorskip("cv_bridge")
pytest.importorskip("sensor_msgs.msg")
pytest.importorskip("stereo_msgs.msg")

from cv_bridge import CvBridge  # noqa: E402
from sensor_msgs.msg import CameraInfo  # noqa: E402

from depth_proc.core.errors import UnsupportedEncoding  # noqa: E402
from depth_proc.utils import msg_utils  # noqa: E402


@pytest.fixture
def bridge():
    return CvBridge()


@pytest.fixture
def to_msg(bridge):
    """Factory building a stamped sensor_msgs/Image from a numpy image"""

    def _make(array, encoding, stamp_ns=1_250_000_000, frame_id="camera"):
        msg = bridge.cv2_to_imgmsg(np.ascontiguousarray(array), encoding=encoding)
        msg.header = msg_utils.make_header(stamp_ns, frame_id)
        return msg

    return _make


class TestImageDecoding:
    """cv_bridge decoding into frames"""

    def test_depth_passthrough(self, bridge, to_msg, depth_mm):
        frame = msg_utils.depth_from_msg(to_msg(depth_mm, "16UC1", frame_id="depth_optical"), bridge)

        assert frame.encoding == "16UC1"
        assert frame.stamp_ns == 1_250_000_000
        assert frame.frame_id == "depth_optical"
        np.testing.assert_array_equal(frame.image, depth_mm)

    @pytest.mark.parametrize("encoding,dtype", [("mono8", np.uint8), ("mono16", np.uint16), ("32FC1", np.float32)])
    def test_native_intensity_untouched(self, bridge, to_msg, encoding, dtype):
        frame = msg_utils.intensity_from_msg(to_msg(np.full((2, 3), 7, dtype=dtype), encoding), bridge)

        assert frame.encoding == encoding
        assert frame.image.dtype == dtype

    def test_8uc1_relabelled(self, bridge, to_msg):
        frame = msg_utils.intensity_from_msg(to_msg(np.full((2, 2), 3, dtype=np.uint8), "8UC1"), bridge)

        assert frame.encoding == "mono8"
        np.testing.assert_array_equal(frame.image, 3)

    def test_colour_converted_to_mono8(self, bridge, to_msg):
        frame = msg_utils.intensity_from_msg(to_msg(np.full((2, 2, 3), 80, dtype=np.uint8), "rgb8"), bridge)

        assert frame.encoding == "mono8"
        assert frame.image.shape == (2, 2)
        np.testing.assert_array_equal(frame.image, 80)

    def test_16bit_colour_scaled_to_mono8(self, bridge, to_msg):
        frame = msg_utils.intensity_from_msg(to_msg(np.full((2, 2, 3), 0xFF00, dtype=np.uint16), "bgr16"), bridge)

        assert frame.encoding == "mono8"
        assert frame.image.dtype == np.uint8

    def test_unknown_encoding(self, bridge, to_msg):
        msg = to_msg(np.zeros((2, 2), dtype=np.uint8), "mono8")
        msg.encoding = "not_an_encoding"

        with pytest.raises(UnsupportedEncoding) as exc:
            msg_utils.intensity_from_msg(msg, bridge)
        assert exc.value.encoding == "not_an_encoding"


class TestMessages:
    """Calibration input and output packing"""

    def test_calibration(self):
        info = CameraInfo()
        info.width, info.height = 640, 480
        info.k = [525.0, 0.0, 320.0, 0.0, 525.0, 240.0, 0.0, 0.0, 1.0]
        info.p = [525.0, 0.0, 320.0, -52.5, 0.0, 525.0, 240.0, 0.0, 0.0, 0.0, 1.0, 0.0]
        info.header = msg_utils.make_header(3, "right")

        calib = msg_utils.calibration_from_msg(info)

        assert (calib.fx, calib.cx, calib.cy) == (525.0, 320.0, 240.0)
        assert calib.p[3] == -52.5
        assert calib.stamp_ns == 3
        assert calib.frame_id == "right"

    def test_stamp_conversion(self):
        stamp = msg_utils.ns_to_stamp(12_000_000_345)

        assert (stamp.sec, stamp.nanosec) == (12, 345)
        assert msg_utils.stamp_to_ns(stamp) == 12_000_000_345

    def test_cloud_message(self, make_frame, make_calibration, depth_mm):
        from depth_proc.core.point_cloud import PointCloudXyziConverter

        intensity = make_frame(np.zeros((3, 4), dtype=np.uint8), "mono8")
        cloud = PointCloudXyziConverter().convert(
            make_frame(depth_mm, "16UC1", frame_id="depth_optical"), intensity, make_calibration(width=4, height=3)
        )

        msg = msg_utils.cloud_to_msg(cloud)

        assert (msg.height, msg.width, msg.point_step, msg.row_step) == (3, 4, 16, 64)
        assert [f.name for f in msg.fields] == ["x", "y", "z", "intensity"]
        assert msg.is_dense is False
        assert msg.header.frame_id == "depth_optical"
        assert len(msg.data) == 3 * 4 * 16

    def test_disparity_message(self, bridge):
        from depth_proc.core.frame_types import DisparityFrame

        frame = DisparityFrame(
            image=np.full((2, 3), 26.25, dtype=np.float32),
            f=525.0,
            t=0.1,
            min_disparity=0.0,
            max_disparity=float("inf"),
            delta_d=0.125,
            stamp_ns=9,
            frame_id="left",
        )

        msg = msg_utils.disparity_to_msg(frame, bridge)

        assert msg.image.encoding == "32FC1"
        assert (msg.image.height, msg.image.width) == (2, 3)
        assert msg.header.frame_id == "left"
        assert msg.delta_d == 0.125
        np.testing.assert_allclose(bridge.imgmsg_to_cv2(msg.image), 26.25)
