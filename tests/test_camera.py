import sys
import types

import cv2
import pytest

import camera as camera_module
from camera import Camera, CameraError
from helpers import blank_frame


class FakeCapture:
    def __init__(self, device, opened=True, frames=1):
        self.device = device
        self.opened = opened
        self.frames = frames
        self.props = {}
        self.released = False

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if self.frames <= 0:
            return False, None
        self.frames -= 1
        return True, blank_frame()

    def release(self):
        self.released = True


@pytest.fixture
def captures(monkeypatch):
    made = []

    def make(device, opened=True):
        capture = FakeCapture(device, opened=opened, frames=2)
        made.append(capture)
        return capture

    monkeypatch.setattr(camera_module.cv2, 'VideoCapture', make)
    return made


def test_unknown_source_is_rejected():
    with pytest.raises(ValueError):
        Camera(source='kinect')


def test_read_before_start_returns_none():
    assert Camera().read() is None


def test_start_requests_frame_size(captures):
    cam = Camera(source='opencv', device=0, width=320, height=240)
    cam.start()

    assert cam.is_running
    assert captures[0].props[cv2.CAP_PROP_FRAME_WIDTH] == 320
    assert captures[0].props[cv2.CAP_PROP_FRAME_HEIGHT] == 240


def test_start_fails_loudly_when_camera_missing(monkeypatch):
    closed = FakeCapture(3, opened=False)
    monkeypatch.setattr(camera_module.cv2, 'VideoCapture', lambda device: closed)

    with pytest.raises(CameraError):
        Camera(source='opencv', device=3).start()
    assert closed.released


def test_read_until_the_feed_runs_dry(captures):
    with Camera(source='opencv', device='match.avi') as cam:
        assert cam.read() is not None
        assert cam.read() is not None
        assert cam.read() is None
        assert cam.get_camera_info()['frame_count'] == 2
    assert captures[0].device == 'match.avi'


def test_stop_releases_capture(captures):
    cam = Camera(source='opencv')
    cam.start()
    cam.start()  # already running, no second capture
    cam.stop()

    assert len(captures) == 1
    assert captures[0].released
    assert not cam.is_running
    assert cam.read() is None


class FakePicamera2:
    instances = []

    def __init__(self):
        self.config = None
        self.started = False
        self.stopped = False
        self.closed = False
        FakePicamera2.instances.append(self)

    def create_video_configuration(self, main):
        return {'main': main}

    def configure(self, config):
        self.config = config

    def start(self):
        self.started = True

    def capture_array(self):
        return blank_frame()

    def stop(self):
        self.stopped = True

    def close(self):
        self.closed = True


class BrokenPicamera2(FakePicamera2):
    def start(self):
        raise RuntimeError("camera __init__ sequence did not complete")


def install_picamera2(monkeypatch, cls):
    module = types.ModuleType('picamera2')
    module.Picamera2 = cls
    monkeypatch.setitem(sys.modules, 'picamera2', module)
    FakePicamera2.instances = []


def test_picamera_start_read_stop(monkeypatch):
    install_picamera2(monkeypatch, FakePicamera2)

    with Camera(source='picamera', width=320, height=240) as cam:
        picam2 = FakePicamera2.instances[0]
        assert picam2.started
        assert picam2.config == {'main': {'size': (320, 240), 'format': 'RGB888'}}
        assert cam.read().shape == blank_frame().shape
        assert cam.get_camera_info()['frame_count'] == 1

    assert picam2.stopped and picam2.closed
    assert not cam.is_running
    assert cam.picam2 is None


def test_picamera_failing_to_start_is_a_camera_error(monkeypatch):
    install_picamera2(monkeypatch, BrokenPicamera2)

    cam = Camera(source='picamera')
    with pytest.raises(CameraError):
        cam.start()
    assert not cam.is_running


def test_picamera_not_installed_is_a_camera_error(monkeypatch):
    monkeypatch.setitem(sys.modules, 'picamera2', None)

    with pytest.raises(CameraError, match="picamera2 is not installed"):
        Camera(source='picamera').start()
