import cv2
import numpy as np

import config

# BGR colours that land inside the default HSV ranges in config
ORANGE = (0, 100, 255)  # hue ~12, ball
BLUE = (255, 0, 0)  # hue 120, home1
PURPLE = (255, 0, 170)  # hue ~140, home2
YELLOW = (0, 255, 255)  # hue 30, away1
GREEN = (0, 255, 0)  # hue 60, away2


def blank_frame():
    return np.zeros((config.frame_height, config.frame_width, 3), np.uint8)


def draw_blob(frame, center, radius, colour):
    cv2.circle(frame, center, radius, colour, -1)
    return frame


class FakeCamera:
    """Hands out a fixed list of frames, then runs dry like the end of a video."""

    def __init__(self, frames):
        self.frames = list(frames)
        self.started = False
        self.stopped = False

    def start(self):
        self.started = True

    def read(self):
        if not self.frames:
            return None
        return self.frames.pop(0)

    def stop(self):
        self.stopped = True


class FakeTrackbars:
    def __init__(self, hsv_range):
        self.hsv_range = hsv_range

    def read(self):
        return self.hsv_range


class FakeGui:
    """Stands in for the highgui calls so tests never open a window."""

    def __init__(self, keys=()):
        self.windows = []
        self.trackbars = {}
        self.shown = {}
        self.keys = list(keys)
        self.destroyed = False

    def namedWindow(self, name, flags=0):
        self.windows.append(name)

    def createTrackbar(self, name, window, value, count, on_change):
        self.trackbars[(window, name)] = value

    def getTrackbarPos(self, name, window):
        return self.trackbars[(window, name)]

    def imshow(self, name, image):
        self.shown[name] = image

    def waitKey(self, delay=0):
        return self.keys.pop(0) if self.keys else -1

    def destroyAllWindows(self):
        self.destroyed = True


