from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

import config


@dataclass
class HSVRange:
    lower: Tuple[int, int, int]
    upper: Tuple[int, int, int]

    def __post_init__(self):
        if len(self.lower) != 3 or len(self.upper) != 3:
            raise ValueError(f"HSV bounds need 3 values each, got {self.lower} and {self.upper}")
        self.lower = tuple(int(v) for v in self.lower)
        self.upper = tuple(int(v) for v in self.upper)

    @classmethod
    def full(cls):
        """Range that lets every pixel through, where the sliders start."""
        top = config.trackbar_max
        return cls((0, 0, 0), (top, top, top))

    def as_arrays(self):
        """Bounds as numpy arrays for cv2.inRange."""
        return np.array(self.lower), np.array(self.upper)

    def to_dict(self):
        return {'lower': list(self.lower), 'upper': list(self.upper)}

    @classmethod
    def from_dict(cls, data):
        try:
            return cls(tuple(data['lower']), tuple(data['upper']))
        except (KeyError, TypeError) as e:
            raise ValueError(f"bad HSV range entry {data!r}: {e}") from e


@dataclass
class Ball:
    x: int = 0
    y: int = 0
    hsv_range: Optional[HSVRange] = None

    def in_frame(self, width=config.frame_width, height=config.frame_height):
        return 0 <= self.x < width and 0 <= self.y < height


@dataclass
class Robot:
    x: int = 0
    y: int = 0
    team: int = config.home_team
    angle: int = 0  # never derived from the image, orientation is not detected
    name: str = ''
    hsv_range: Optional[HSVRange] = field(default=None, repr=False)

    def in_frame(self, width=config.frame_width, height=config.frame_height):
        return 0 <= self.x < width and 0 <= self.y < height


def default_ranges():
    """
    HSV ranges from config for every tracked object.

    Returns:
        dict: object name -> HSVRange, 'ball' plus every robot marker
    """
    ranges = {'ball': HSVRange(*config.ball_hsv)}
    for name, (_, lower, upper) in config.robot_markers.items():
        ranges[name] = HSVRange(lower, upper)
    return ranges
