import cv2
import pytest

import config
from field_objects import HSVRange
from helpers import BLUE, GREEN, ORANGE, PURPLE, YELLOW, FakeGui, blank_frame, draw_blob


@pytest.fixture
def fake_gui(monkeypatch):
    gui = FakeGui()
    for name in ('namedWindow', 'createTrackbar', 'getTrackbarPos', 'imshow', 'waitKey', 'destroyAllWindows'):
        monkeypatch.setattr(cv2, name, getattr(gui, name))
    return gui


@pytest.fixture
def field_frame():
    """Ball and all four robots, each in its own colour."""
    frame = blank_frame()
    draw_blob(frame, (320, 240), 30, ORANGE)
    draw_blob(frame, (100, 100), 30, BLUE)
    draw_blob(frame, (540, 100), 30, PURPLE)
    draw_blob(frame, (100, 380), 30, YELLOW)
    draw_blob(frame, (540, 380), 30, GREEN)
    return frame


@pytest.fixture
def ball_range():
    return HSVRange(*config.ball_hsv)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    import field_vision
    monkeypatch.setattr(field_vision.time, 'sleep', lambda seconds: None)
