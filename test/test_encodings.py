"""Tests for image frames and depth decoding"""

import numpy as np
import pytest

from depth_proc.core.encodings import decode_depth, decode_depth_frame, decode_intensity
from depth_proc.core.errors import InvalidFrame, UnsupportedEncoding
from depth_proc.core.frame_types import ImageFrame


class TestDecodeDepth:
    """Encoding-aware conversion to meters"""

    def test_millimeters_and_meters_agree(self):
        depth_mm, valid_mm = decode_depth(np.uint16(1500), "16UC1")
        depth_m, valid_m = decode_depth(np.float32(1.5), "32FC1")

        assert float(depth_mm) == pytest.approx(1.5)
        assert float(depth_m) == pytest.approx(1.5)
        assert bool(valid_mm) and bool(valid_m)

    def test_zero_millimeters_is_invalid(self):
        _, valid = decode_depth(np.array([0, 1, 65535], dtype=np.uint16), "16UC1")
        np.testing.assert_array_equal(valid, [False, True, True])

    def test_float_invalid_samples(self):
        raw = np.array([np.nan, np.inf, -np.inf, 0.0, -1.0, 0.25], dtype=np.float32)
        _, valid = decode_depth(raw, "32FC1")
        np.testing.assert_array_equal(valid, [False, False, False, False, False, True])

    def test_unsupported_encoding(self):
        with pytest.raises(UnsupportedEncoding) as exc:
            decode_depth(np.uint8(3), "mono8")
        assert exc.value.encoding == "mono8"

    def test_decode_frame(self, make_frame, depth_mm):
        depth, valid = decode_depth_frame(make_frame(depth_mm, "16UC1"))

        assert depth.shape == (3, 4)
        assert depth[1, 2] == pytest.approx(2.5)
        assert not valid[0, 2]
        assert valid.sum() == 10

    def test_unsupported_frame_encoding(self, make_frame):
        frame = make_frame(np.zeros((2, 2, 3), dtype=np.uint8), "bgr8")
        with pytest.raises(UnsupportedEncoding):
            decode_depth_frame(frame)


class TestImageFrame:
    """Decoded image container"""

    def test_geometry(self, make_frame):
        frame = make_frame(np.zeros((5, 7, 3), dtype=np.uint8), "bgr8", stamp_ns=1_500_000_000)

        assert (frame.height, frame.width) == (5, 7)
        assert frame.shape == (5, 7)
        assert frame.stamp == pytest.approx(1.5)

    def test_flat_array_rejected(self):
        with pytest.raises(InvalidFrame):
            ImageFrame(image=np.zeros(8, dtype=np.uint16), encoding="16UC1")


class TestDecodeIntensity:
    """Intensity channel extraction"""

    @pytest.mark.parametrize(
        "encoding,dtype,value",
        [("mono8", np.uint8, 200), ("mono16", np.uint16, 40000), ("16UC1", np.uint16, 7), ("32FC1", np.float32, 0.5)],
    )
    def test_supported(self, make_frame, encoding, dtype, value):
        frame = make_frame(np.full((2, 3), value, dtype=dtype), encoding)
        intensity = decode_intensity(frame)

        assert intensity.dtype == np.float32
        np.testing.assert_allclose(intensity, value)

    def test_colour_needs_conversion(self, make_frame):
        frame = make_frame(np.zeros((2, 2, 3), dtype=np.uint8), "rgb8")
        with pytest.raises(UnsupportedEncoding):
            decode_intensity(frame)
