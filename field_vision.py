#!/usr/bin/env python3
"""
Overhead field vision.

Reads the overhead camera over the field, finds the ball and up to four robots
by colour and draws their screen positions on a live preview. Run with
--calibrate to tune an HSV range with sliders and save it with 'w'.
"""

import argparse
import logging
import os
import sys
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import cv2
import numpy as np

import config
import detection
import overlay
from calibration import Trackbars, load_profile, update_profile
from camera import Camera, CameraError
from field_objects import Ball, HSVRange, Robot, default_ranges

logger = logging.getLogger(__name__)

ESC = 27


@dataclass
class FrameResult:
    frame: np.ndarray
    ball: Optional[Ball] = None
    robots: List[Robot] = field(default_factory=list)
    raw_mask: Optional[np.ndarray] = None
    mask: Optional[np.ndarray] = None
    too_noisy: bool = False
    frame_size: Tuple[int, int] = (config.frame_width, config.frame_height)  # (width, height)


class FieldVision:
    def __init__(self, camera, calibration_mode=True, ranges=None, trackbars=None,
                 show=True, show_hsv=False, target='ball', profile_path=config.hsv_profile_path,
                 max_frames=0):
        """
        Set up the vision loop.

        Args:
            camera: Anything with start/read/stop, usually a Camera
            calibration_mode: Track one range from the sliders instead of the configured colours
            ranges: Object name -> HSVRange, defaults to the colours in config
            trackbars: Slider source for calibration mode, a slider window is opened if None
            show: Open preview windows, False logs detections instead
            show_hsv: Also show the HSV image
            target: Object name that 'w' saves the slider range under
            profile_path: Calibration profile JSON
            max_frames: Stop after this many frames, 0 runs until the camera runs dry
        """
        self.camera = camera
        self.calibration_mode = calibration_mode
        self.ranges = ranges if ranges is not None else default_ranges()
        self.show = show
        self.show_hsv = show_hsv
        self.target = target
        self.profile_path = profile_path
        self.max_frames = max_frames

        if calibration_mode and trackbars is None:
            if not show:
                raise ValueError("calibration needs the slider window, pass trackbars or show=True")
            trackbars = Trackbars(initial=self.ranges.get(target))
        self.trackbars = trackbars

        self.frame_count = 0
        self.running = False
        self.last_result = None

    def process_frame(self, frame):
        """
        Find objects in one frame and draw them on it.

        Args:
            frame: BGR frame from the camera, drawn on in place

        Returns:
            FrameResult: the annotated frame and whatever was found
        """
        hsv = detection.to_hsv(frame)
        if self.calibration_mode:
            result = self._process_calibration(frame, hsv)
        else:
            result = self._process_match(frame, hsv)
        result.frame_size = (frame.shape[1], frame.shape[0])

        if result.too_noisy:
            overlay.draw_noise_warning(frame)
        if self.show and self.show_hsv:
            cv2.imshow(config.window_hsv, hsv)
        return result

    def _process_calibration(self, frame, hsv):
        # the sliders decide the range
        hsv_range = self.trackbars.read()
        blob, raw, cleaned = detection.detect(hsv, hsv_range)
        result = FrameResult(frame=frame, raw_mask=raw, mask=cleaned, too_noisy=blob.too_noisy)

        if blob.found:
            result.ball = Ball(blob.x, blob.y, hsv_range)
            if self.target == 'ball':
                overlay.draw_ball(frame, result.ball)
            else:
                overlay.draw_object(frame, blob.x, blob.y)
        return result

    def _process_match(self, frame, hsv):
        result = FrameResult(frame=frame)

        ball_range = self.ranges['ball']
        blob, _, cleaned = detection.detect(hsv, ball_range)
        result.mask = cleaned
        result.too_noisy = blob.too_noisy
        if blob.found:
            result.ball = Ball(blob.x, blob.y, ball_range)

        for name, (team, _, _) in config.robot_markers.items():
            hsv_range = self.ranges.get(name)
            if hsv_range is None:
                continue
            blob, _, _ = detection.detect(hsv, hsv_range)
            result.too_noisy = result.too_noisy or blob.too_noisy
            if blob.found:
                result.robots.append(Robot(blob.x, blob.y, team=team, name=name, hsv_range=hsv_range))

        if result.ball is not None:
            overlay.draw_ball(frame, result.ball)
        overlay.draw_all_robots(frame, result.robots)
        return result

    def _log_result(self, result):
        ball = f"({result.ball.x}, {result.ball.y})" if result.ball else "none"
        robots = ", ".join(f"{r.name or 'robot'} team {r.team} ({r.x}, {r.y})" for r in result.robots)
        logger.debug(f"frame {self.frame_count}: ball {ball}; robots [{robots}]"
                     + (" (too noisy)" if result.too_noisy else ""))

    def _show(self, result):
        cv2.imshow(config.window_original, result.frame)
        if self.calibration_mode:
            cv2.imshow(config.window_threshold, result.raw_mask)
            cv2.imshow(config.window_morph, result.mask)

    def _handle_key(self, key):
        """Returns False when the user asked to quit."""
        if key in (ord('q'), ESC):
            return False
        if key == ord('s'):
            self.save_snapshot()
        elif key == ord('w') and self.calibration_mode:
            self.save_calibration()
        return True

    def save_snapshot(self):
        if self.last_result is None:
            return
        timestamp = int(time.time())
        frame_path = os.path.join(config.snapshot_dir, f'field_frame_{timestamp}.jpg')
        cv2.imwrite(frame_path, self.last_result.frame)
        if self.last_result.mask is not None:
            cv2.imwrite(os.path.join(config.snapshot_dir, f'field_mask_{timestamp}.jpg'), self.last_result.mask)
        logger.info(f"Saved frames with timestamp {timestamp}")

    def save_calibration(self):
        """Store the slider range as the calibration target's range."""
        hsv_range = self.trackbars.read()
        update_profile(self.profile_path, self.target, hsv_range)
        self.ranges[self.target] = hsv_range
        logger.info(f"saved {self.target} range {hsv_range.lower} - {hsv_range.upper}")

    def step(self):
        """
        Run one pass of the loop.

        Returns:
            bool: False once the loop should stop
        """
        frame = self.camera.read()
        if frame is None:
            logger.warning("Failed to grab frame, stopping")
            return False

        self.frame_count += 1
        self.last_result = self.process_frame(frame)

        if self.show:
            self._show(self.last_result)
            key = cv2.waitKey(config.frame_delay_ms) & 0xFF
            if not self._handle_key(key):
                return False
        else:
            self._log_result(self.last_result)
            time.sleep(config.frame_delay_ms / 1000.0)

        if self.max_frames and self.frame_count >= self.max_frames:
            return False
        return True

    def run(self):
        self.running = True
        try:
            self.camera.start()
            while self.running and self.step():
                pass
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.stop()

    def stop(self):
        self.running = False
        self.camera.stop()
        if self.show:
            cv2.destroyAllWindows()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Find the ball and robots on the field from the overhead camera.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--calibrate", dest="calibrate", action="store_true", default=True,
                      help="Tune an HSV range with sliders (default)")
    mode.add_argument("--match", dest="calibrate", action="store_false",
                      help="Track the ball and robots with the saved colours")
    parser.add_argument("--target", default="ball", choices=config.object_names,
                        help="Object the sliders are calibrating, 'w' saves under this name")
    parser.add_argument("--source", default=config.camera_source, choices=["opencv", "picamera"])
    parser.add_argument("--device", default=str(config.camera_device),
                        help="Camera index or video file path")
    parser.add_argument("--width", type=int, default=config.frame_width)
    parser.add_argument("--height", type=int, default=config.frame_height)
    parser.add_argument("--profile", default=config.hsv_profile_path, help="Calibration profile JSON")
    parser.add_argument("--show-hsv", action="store_true", help="Also show the HSV image")
    parser.add_argument("--headless", action="store_true", help="No windows, log detections instead")
    parser.add_argument("--max-frames", type=int, default=0, help="Stop after N frames (0 = no limit)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def _device(value):
    try:
        return int(value)
    except ValueError:
        return value


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    print("⚽ Overhead Field Vision")
    print("=" * 40)

    try:
        ranges = default_ranges()
        ranges.update(load_profile(args.profile))
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 1

    if args.calibrate and args.headless:
        print("❌ Error: calibration needs the slider window, drop --headless")
        return 1

    camera = Camera(source=args.source, device=_device(args.device), width=args.width, height=args.height)
    vision = FieldVision(
        camera,
        calibration_mode=args.calibrate,
        ranges=ranges,
        show=not args.headless,
        show_hsv=args.show_hsv,
        target=args.target,
        profile_path=args.profile,
        max_frames=args.max_frames,
    )

    if args.calibrate:
        print(f"Calibrating '{args.target}': move the sliders until only it is white")
        print("Press 'w' to save the range, 's' to save a snapshot, 'q' to quit")
    else:
        print("Tracking ball and robots, press 's' to save a snapshot, 'q' to quit")
    print("-" * 40)

    try:
        vision.run()
    except CameraError as e:
        print(f"❌ Camera Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
