from setuptools import find_packages, setup
import os
from glob import glob

package_name = 'depth_proc'

setup(
    # Package metadata
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    # Install data files for ROS 2
    data_files=[
        ('share/ament_index/resource_index/packages', ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
        (os.path.join('share', package_name, 'config'), glob('config/*.yaml')),
    ],
    # rclpy, message_filters and the message packages come from package.xml (rosdep)
    install_requires=[
        'setuptools',
        'numpy',
        'opencv-python',
        'PyYAML',
    ],
    zip_safe=True,
    # Maintainer information
    maintainer='pratik',
    maintainer_email='pratik.adhikari@smail.inf.h-brs.de',
    description='Depth image to disparity image and XYZI point cloud conversion nodes',
    license='BSD-3-Clause',
    tests_require=['pytest'],
    extras_require={'test': ['pytest']},
    # Executable entry points
    entry_points={
        'console_scripts': [
            'disparity_node = depth_proc.disparity_node:main',
            'point_cloud_xyzi_node = depth_proc.point_cloud_xyzi_node:main',
        ],
    },
)
