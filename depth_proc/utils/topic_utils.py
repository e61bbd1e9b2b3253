#!/usr/bin/env python3
"""Topic name helpers."""

def camera_info_topic(image_topic: str) -> str:
    """Sibling camera_info topic of an image topic (/cam/image_rect -> /cam/camera_info)."""
    base, sep, _ = image_topic.rpartition("/")
    return f"{base}{sep}camera_info"
