#!/usr/bin/env python3
"""Launches the disparity and XYZI point cloud nodes."""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.conditions import IfCondition
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node
from launch_ros.substitutions import FindPackageShare
from launch.substitutions import PathJoinSubstitution

def generate_launch_description() -> LaunchDescription:
    config_file = LaunchConfiguration("config_file")
    use_sim_time = LaunchConfiguration("use_sim_time")
    log_level = LaunchConfiguration("log_level")
    depth_image = LaunchConfiguration("depth_image")
    intensity_image = LaunchConfiguration("intensity_image")
    right_info = LaunchConfiguration("right_info")

    config_path = PathJoinSubstitution(
        [FindPackageShare("depth_proc"), "config", config_file]
    )

    return LaunchDescription([
        DeclareLaunchArgument(
            "config_file",
            default_value="depth_proc.yaml",
            description="Parameter profile YAML in depth_proc/config.",
        ),
        DeclareLaunchArgument(
            "depth_image", default_value="/camera/depth/image_rect", description="Depth image topic."
        ),
        DeclareLaunchArgument(
            "intensity_image", default_value="/camera/ir/image_rect", description="Intensity image topic."
        ),
        DeclareLaunchArgument(
            "right_info",
            default_value="/camera/depth/camera_info",
            description="Camera info carrying the stereo baseline for disparity output.",
        ),
        DeclareLaunchArgument(
            "disparity", default_value="true", description="Start the disparity node."
        ),
        DeclareLaunchArgument(
            "point_cloud", default_value="true", description="Start the XYZI point cloud node."
        ),
        DeclareLaunchArgument(
            "use_sim_time", default_value="false", description="Use Gazebo / simulation time."
        ),
        DeclareLaunchArgument(
            "log_level", default_value="info", description="ROS 2 log level."
        ),
        Node(
            package="depth_proc",
            executable="disparity_node",
            name="disparity_node",
            output="screen",
            condition=IfCondition(LaunchConfiguration("disparity")),
            parameters=[{
                "config_file": config_path,
                "use_sim_time": use_sim_time,
            }],
            remappings=[
                ("left/image_rect", depth_image),
                ("right/camera_info", right_info),
            ],
            arguments=["--ros-args", "--log-level", log_level],
        ),
        Node(
            package="depth_proc",
            executable="point_cloud_xyzi_node",
            name="point_cloud_xyzi_node",
            output="screen",
            condition=IfCondition(LaunchConfiguration("point_cloud")),
            parameters=[{
                "config_file": config_path,
                "use_sim_time": use_sim_time,
            }],
            remappings=[
                ("depth/image_rect", depth_image),
                ("intensity/image_rect", intensity_image),
            ],
            arguments=["--ros-args", "--log-level", log_level],
        ),
    ])
