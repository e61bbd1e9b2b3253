"""ROS 2 node that turns depth images into stereo_msgs/DisparityImage.

Subscribes to left/image_rect + right/camera_info (exact time sync) only
while left/disparity has at least one subscriber.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
import rclpy
from rclpy.node import Node
from rclpy.event_handler import PublisherEventCallbacks, QoSPublisherMatchedInfo
from rclpy.qos import qos_profile_sensor_data
from cv_bridge import CvBridge
from message_filters import Subscriber, TimeSynchronizer
from sensor_msgs.msg import CameraInfo, Image
from stereo_msgs.msg import DisparityImage
from depth_proc.core.disparity import DisparityConfig, DisparityConverter
from depth_proc.core.frame_pipeline import FramePipeline
from depth_proc.core.subscription_manager import DemandSubscriptionManager
from depth_proc.utils.config_utils import disparity_config_from_dict, load_profile, resolve_config_path
from depth_proc.utils.msg_utils import calibration_from_msg, depth_from_msg, disparity_to_msg

class DisparityNode(Node):
    """Publishes f*t/Z for every valid depth pixel."""

    def __init__(self) -> None:
        """Read parameters, build the converter and the on-demand publisher."""
        super().__init__("disparity_node")

        # Optional YAML profile supplies parameter defaults
        self.declare_parameter("config_file", "")
        config_file = str(self.get_parameter("config_file").value)
        profile: Dict[str, Any] = {}
        if config_file:
            cfg_path = resolve_config_path(config_file)
            self.get_logger().info(f"Loading disparity config: {cfg_path}")
            profile = load_profile(cfg_path, self.get_name())

        defaults = DisparityConfig()
        values = {}
        for name, default in (
            ("queue_size", defaults.queue_size),
            ("min_range", defaults.min_range),
            ("max_range", defaults.max_range),
            ("delta_d", defaults.delta_d),
        ):
            initial = type(default)(profile.get(name, default))
            values[name] = self.declare_parameter(name, initial).value
        self.cfg = disparity_config_from_dict(values)
        self._bridge = CvBridge()
        self._converter = DisparityConverter(self.cfg)

        # Topic subscriptions and the synchronizer exist only while someone listens
        self._depth_sub: Optional[Subscriber] = None
        self._info_sub: Optional[Subscriber] = None
        self._sync: Optional[TimeSynchronizer] = None
        self._connection = DemandSubscriptionManager(self._subscribe, self._unsubscribe)

        self._pub_disparity = self.create_publisher(
            DisparityImage,
            "left/disparity",
            qos_profile_sensor_data,
            event_callbacks=PublisherEventCallbacks(matched=self._on_matched),
        )
        self._pipeline = FramePipeline(
            decode=self._decode,
            convert=self._converter.convert,
            publish=lambda frame: self._pub_disparity.publish(disparity_to_msg(frame, self._bridge)),
            logger=self.get_logger(),
            tag="DisparityNode",
        )
        self.get_logger().info(
            f"[DisparityNode] queue_size={self.cfg.queue_size} min_range={self.cfg.min_range} "
            f"max_range={self.cfg.max_range} delta_d={self.cfg.delta_d}"
        )

    def _on_matched(self, info: QoSPublisherMatchedInfo) -> None:
        """Publisher matched event: (un)subscribe upstream as consumers come and go."""
        self._connection.update(int(info.current_count))

    def _subscribe(self) -> None:
        # Resolve remappings up front so logs show the real topics
        depth_topic = self.resolve_topic_name("left/image_rect")
        info_topic = self.resolve_topic_name("right/camera_info")
        self._depth_sub = Subscriber(self, Image, depth_topic, qos_profile=qos_profile_sensor_data)
        self._info_sub = Subscriber(self, CameraInfo, info_topic, qos_profile=10)
        self._sync = TimeSynchronizer([self._depth_sub, self._info_sub], int(self.cfg.queue_size))
        self._sync.registerCallback(self._depth_cb)
        self.get_logger().info(f"[DisparityNode] subscribed depth='{depth_topic}' info='{info_topic}'")

    def _unsubscribe(self) -> None:
        for sub in (self._depth_sub, self._info_sub):
            if sub is not None:
                self.destroy_subscription(sub.sub)
        # Buffered messages go with the synchronizer
        self._sync = None
        self._depth_sub = None
        self._info_sub = None
        self.get_logger().info("[DisparityNode] no subscribers left, unsubscribed inputs")

    def _decode(self, depth_msg: Image, info_msg: CameraInfo):
        return depth_from_msg(depth_msg, self._bridge), calibration_from_msg(info_msg)

    def _depth_cb(self, depth_msg: Image, info_msg: CameraInfo) -> None:
        """Synchronized callback for depth image + camera info."""
        self._pipeline(depth_msg, info_msg)

    def destroy_node(self) -> bool:
        self._connection.shutdown()
        return super().destroy_node()

def main(args=None) -> None:
    """Entry point: ros2 run depth_proc disparity_node"""
    rclpy.init(args=args)
    node = DisparityNode()
    rclpy.spin(node)
    node.destroy_node()
    rclpy.shutdown()

if __name__ == "__main__":
    main()
