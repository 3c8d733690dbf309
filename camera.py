import logging

import cv2

import config

logger = logging.getLogger(__name__)


class CameraError(RuntimeError):
    """Raised when the camera cannot be opened."""


class Camera:
    """
    Frame source for the overhead field camera.
    Wraps either an OpenCV VideoCapture (webcam index or video file) or the Pi camera.
    """

    def __init__(self, source=config.camera_source, device=config.camera_device,
                 width=config.frame_width, height=config.frame_height):
        """
        Initialize the camera, nothing is opened until start().

        Args:
            source: 'opencv' or 'picamera'
            device: Webcam index or video file path (opencv only)
            width: Requested frame width
            height: Requested frame height
        """
        if source not in ('opencv', 'picamera'):
            raise ValueError(f"unknown camera source {source!r}")

        self.source = source
        self.device = device
        self.width = width
        self.height = height

        self.capture = None
        self.picam2 = None
        self.is_running = False
        self.frame_count = 0

    def start(self):
        """Open the camera. Raises CameraError if it can't be opened."""
        if self.is_running:
            logger.info("Camera is already running")
            return

        if self.source == 'picamera':
            self._start_picamera()
        else:
            self._start_opencv()

        self.is_running = True
        logger.info(f"Camera started ({self.source}, device={self.device}, {self.width}x{self.height})")

    def _start_opencv(self):
        capture = cv2.VideoCapture(self.device)
        if not capture.isOpened():
            capture.release()
            raise CameraError(f"could not open camera {self.device!r}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.capture = capture

    def _start_picamera(self):
        # only installed on the pi
        try:
            from picamera2 import Picamera2
        except ImportError as e:
            raise CameraError("picamera2 is not installed, pip install .[pi]") from e

        try:
            picam2 = Picamera2()
            picam2.configure(picam2.create_video_configuration(
                main={"size": (self.width, self.height), "format": "RGB888"}
            ))
            picam2.start()
        except Exception as e:
            raise CameraError(f"could not start pi camera: {e}") from e
        self.picam2 = picam2

    def read(self):
        """
        Grab the next frame.

        Returns:
            numpy.ndarray: BGR frame, or None if no frame could be grabbed
        """
        if not self.is_running:
            return None

        if self.picam2 is not None:
            frame = self.picam2.capture_array()
        else:
            ret, frame = self.capture.read()
            if not ret:
                frame = None

        if frame is not None:
            self.frame_count += 1
        return frame

    def stop(self):
        """Release the camera."""
        if not self.is_running:
            return

        if self.capture is not None:
            self.capture.release()
            self.capture = None
        if self.picam2 is not None:
            self.picam2.stop()
            self.picam2.close()
            self.picam2 = None

        self.is_running = False
        logger.info(f"Camera stopped after {self.frame_count} frames")

    def get_camera_info(self):
        return {
            'is_running': self.is_running,
            'source': self.source,
            'device': self.device,
            'size': (self.width, self.height),
            'frame_count': self.frame_count,
        }

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
