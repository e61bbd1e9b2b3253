"""ROS 2 node that builds an XYZI PointCloud2 from depth and intensity images.

depth/image_rect, intensity/image_rect and the intensity camera_info are
matched with an approximate time policy; inputs are only subscribed while
``points`` has subscribers.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
import rclpy
from rclpy.node import Node
from rclpy.event_handler import PublisherEventCallbacks, QoSPublisherMatchedInfo
from rclpy.qos import qos_profile_sensor_data
from cv_bridge import CvBridge
from message_filters import ApproximateTimeSynchronizer, Subscriber
from sensor_msgs.msg import CameraInfo, Image, PointCloud2
from depth_proc.core.frame_pipeline import FramePipeline
from depth_proc.core.point_cloud import PointCloudConfig, PointCloudXyziConverter
from depth_proc.core.subscription_manager import DemandSubscriptionManager
from depth_proc.utils.config_utils import load_profile, point_cloud_config_from_dict, resolve_config_path
from depth_proc.utils.msg_utils import (
    calibration_from_msg,
    cloud_to_msg,
    depth_from_msg,
    intensity_from_msg,
)
from depth_proc.utils.topic_utils import camera_info_topic

class PointCloudXyziNode(Node):
    """Publishes one organized x, y, z, intensity point per depth pixel."""

    def __init__(self) -> None:
        """Read parameters, build the converter and the on-demand publisher."""
        super().__init__("point_cloud_xyzi_node")

        self.declare_parameter("config_file", "")
        config_file = str(self.get_parameter("config_file").value)
        profile: Dict[str, Any] = {}
        if config_file:
            cfg_path = resolve_config_path(config_file)
            self.get_logger().info(f"Loading point cloud config: {cfg_path}")
            profile = load_profile(cfg_path, self.get_name())

        defaults = PointCloudConfig()
        values = {}
        for name, default in (
            ("queue_size", defaults.queue_size),
            ("slop", defaults.slop),
            ("invalid_depth", defaults.invalid_depth),
        ):
            initial = type(default)(profile.get(name, default))
            values[name] = self.declare_parameter(name, initial).value
        self.cfg = point_cloud_config_from_dict(values)
        self._bridge = CvBridge()
        self._converter = PointCloudXyziConverter(self.cfg, on_frame_mismatch=self._warn_frame_mismatch)

        self._depth_sub: Optional[Subscriber] = None
        self._intensity_sub: Optional[Subscriber] = None
        self._info_sub: Optional[Subscriber] = None
        self._sync: Optional[ApproximateTimeSynchronizer] = None
        self._connection = DemandSubscriptionManager(self._subscribe, self._unsubscribe)

        self._pub_point_cloud = self.create_publisher(
            PointCloud2,
            "points",
            qos_profile_sensor_data,
            event_callbacks=PublisherEventCallbacks(matched=self._on_matched),
        )
        self._pipeline = FramePipeline(
            decode=self._decode,
            convert=self._converter.convert,
            publish=lambda cloud: self._pub_point_cloud.publish(cloud_to_msg(cloud)),
            logger=self.get_logger(),
            tag="PointCloudXyziNode",
        )
        self.get_logger().info(
            f"[PointCloudXyziNode] queue_size={self.cfg.queue_size} slop={self.cfg.slop} "
            f"invalid_depth={self.cfg.invalid_depth}"
        )

    def _on_matched(self, info: QoSPublisherMatchedInfo) -> None:
        self._connection.update(int(info.current_count))

    def _subscribe(self) -> None:
        depth_topic = self.resolve_topic_name("depth/image_rect")
        intensity_topic = self.resolve_topic_name("intensity/image_rect")
        # camera_info may be remapped separately from the image it belongs to
        info_topic = self.resolve_topic_name(camera_info_topic(intensity_topic))
        self._depth_sub = Subscriber(self, Image, depth_topic, qos_profile=qos_profile_sensor_data)
        self._intensity_sub = Subscriber(self, Image, intensity_topic, qos_profile=qos_profile_sensor_data)
        self._info_sub = Subscriber(self, CameraInfo, info_topic, qos_profile=10)
        self._sync = ApproximateTimeSynchronizer(
            [self._depth_sub, self._intensity_sub, self._info_sub],
            queue_size=int(self.cfg.queue_size),
            slop=float(self.cfg.slop),
        )
        self._sync.registerCallback(self._image_cb)
        self.get_logger().info(
            f"[PointCloudXyziNode] subscribed depth='{depth_topic}' "
            f"intensity='{intensity_topic}' info='{info_topic}'"
        )

    def _unsubscribe(self) -> None:
        for sub in (self._depth_sub, self._intensity_sub, self._info_sub):
            if sub is not None:
                self.destroy_subscription(sub.sub)
        self._sync = None
        self._depth_sub = None
        self._intensity_sub = None
        self._info_sub = None
        self.get_logger().info("[PointCloudXyziNode] no subscribers left, unsubscribed inputs")

    def _decode(self, depth_msg: Image, intensity_msg: Image, info_msg: CameraInfo):
        return (
            depth_from_msg(depth_msg, self._bridge),
            intensity_from_msg(intensity_msg, self._bridge),
            calibration_from_msg(info_msg),
        )

    def _warn_frame_mismatch(self, depth_frame_id: str, intensity_frame_id: str) -> None:
        self.get_logger().warn(
            f"[PointCloudXyziNode] Depth image frame id [{depth_frame_id}] doesn't match "
            f"image frame id [{intensity_frame_id}]",
            throttle_duration_sec=10.0,
        )

    def _image_cb(self, depth_msg: Image, intensity_msg: Image, info_msg: CameraInfo) -> None:
        """Synchronized callback for depth + intensity + camera info."""
        self._pipeline(depth_msg, intensity_msg, info_msg)

    def destroy_node(self) -> bool:
        self._connection.shutdown()
        return super().destroy_node()

def main(args=None) -> None:
    """Entry point: ros2 run depth_proc point_cloud_xyzi_node"""
    rclpy.init(args=args)
    node = PointCloudXyziNode()
    rclpy.spin(node)
    node.destroy_node()
    rclpy.shutdown()

if __name__ == "__main__":
    main()
