import socket
import logging

logger = logging.getLogger(__name__)

hostname = socket.gethostname()

""" capture """
frame_width = 640
frame_height = 480
frame_delay_ms = 30  # waitKey delay, the display will not refresh without it

if hostname.startswith('raspberrypi') or hostname == 'fieldcam':
    logger.info(f'running on {hostname}, using the pi camera')
    camera_source = 'picamera'
    camera_device = 0
else:
    logger.info(f'running on {hostname}, using default configuration')
    camera_source = 'opencv'
    camera_device = 0  # default webcam

""" detection """
max_num_objects = 50  # this many contours or more means the filter is too noisy
min_object_area = 40 * 40  # anything smaller is probably noise
bad_filter_divisor = 1.5  # blobs over frame area / this are probably a bad filter
max_object_area = frame_height * frame_width / bad_filter_divisor

erode_kernel_size = (3, 3)
dilate_kernel_size = (8, 8)  # bigger than erode so the object is nicely visible
morph_iterations = 2

""" windows """
window_original = "Original Image"
window_hsv = "HSV Image"
window_threshold = "Thresholded Image"
window_morph = "After Morphological Operations"
window_trackbars = "Trackbars"

trackbar_max = 256
trackbar_names = ['H_MIN', 'H_MAX', 'S_MIN', 'S_MAX', 'V_MIN', 'V_MAX']

""" teams """
home_team = 1
away_team = 2

""" colours, (lower, upper) HSV """
# these are starting points, run with --calibrate and save with 'w' for the real field
ball_hsv = ((0, 132, 61), (14, 255, 255))  # orange
robot_markers = {  # name -> (team, lower, upper)
    'home1': (home_team, (100, 150, 50), (125, 255, 255)),  # blue
    'home2': (home_team, (130, 80, 50), (160, 255, 255)),  # purple
    'away1': (away_team, (20, 100, 100), (35, 255, 255)),  # yellow
    'away2': (away_team, (40, 80, 50), (80, 255, 255)),  # green
}
object_names = ['ball'] + list(robot_markers)

hsv_profile_path = 'hsv_ranges.json'
snapshot_dir = '.'
