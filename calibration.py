import json
import logging
import os

import cv2

import config
from field_objects import HSVRange

logger = logging.getLogger(__name__)


def on_trackbar(value):
    # positions are polled with getTrackbarPos every frame
    pass


class Trackbars:
    """
    Slider window for tuning one HSV range by hand.
    """

    def __init__(self, initial=None, window_name=config.window_trackbars):
        """
        Create the slider window.

        Args:
            initial: HSVRange to start the sliders at, defaults to the full 0..256 range
            window_name: Name of the window holding the sliders
        """
        self.window_name = window_name
        initial = initial or HSVRange.full()
        starts = [initial.lower[0], initial.upper[0],
                  initial.lower[1], initial.upper[1],
                  initial.lower[2], initial.upper[2]]

        cv2.namedWindow(self.window_name, 0)
        for name, start in zip(config.trackbar_names, starts):
            cv2.createTrackbar(name, self.window_name, min(int(start), config.trackbar_max),
                               config.trackbar_max, on_trackbar)
        logger.info(f"created trackbars starting at {initial}")

    def read(self):
        """
        Current slider positions.

        Returns:
            HSVRange: lower/upper bounds set on the sliders
        """
        h_min, h_max, s_min, s_max, v_min, v_max = [
            cv2.getTrackbarPos(name, self.window_name) for name in config.trackbar_names
        ]
        return HSVRange((h_min, s_min, v_min), (h_max, s_max, v_max))


def load_profile(path=config.hsv_profile_path):
    """
    Load calibrated HSV ranges from a JSON profile.

    Returns:
        dict: object name -> HSVRange, empty if the file does not exist
    """
    if not os.path.exists(path):
        logger.info(f"no calibration profile at {path}, using defaults")
        return {}

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"calibration profile {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"calibration profile {path} should hold an object, got {type(data).__name__}")

    ranges = {name: HSVRange.from_dict(entry) for name, entry in data.items()}
    logger.info(f"loaded {len(ranges)} HSV ranges from {path}")
    return ranges


def save_profile(path, ranges):
    with open(path, 'w') as f:
        json.dump({name: r.to_dict() for name, r in ranges.items()}, f, indent=2)
    logger.info(f"saved {len(ranges)} HSV ranges to {path}")


def update_profile(path, name, hsv_range):
    """Write one object's range into the profile, keeping the others."""
    ranges = load_profile(path)
    ranges[name] = hsv_range
    save_profile(path, ranges)
    return ranges
