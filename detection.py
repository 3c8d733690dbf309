import logging
from dataclasses import dataclass

import cv2

import config

logger = logging.getLogger(__name__)

_erode_element = cv2.getStructuringElement(cv2.MORPH_RECT, config.erode_kernel_size)
_dilate_element = cv2.getStructuringElement(cv2.MORPH_RECT, config.dilate_kernel_size)


@dataclass
class BlobResult:
    found: bool = False
    x: int = 0
    y: int = 0
    area: float = 0.0
    contour_count: int = 0
    too_noisy: bool = False


def to_hsv(frame):
    return cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)


def threshold(hsv, hsv_range):
    lower, upper = hsv_range.as_arrays()
    return cv2.inRange(hsv, lower, upper)


def morph_ops(mask):
    """
    Reduce noise in a thresholded mask.

    Erodes first so specks disappear, then dilates the survivors with a larger
    element so the remaining objects come back a bit fuller than they were.

    Args:
        mask: Binary mask from threshold()

    Returns:
        numpy.ndarray: Cleaned mask (the input is left untouched)
    """
    cleaned = cv2.erode(mask, _erode_element, iterations=config.morph_iterations)
    cleaned = cv2.dilate(cleaned, _dilate_element, iterations=config.morph_iterations)
    return cleaned


def track_filtered_object(mask, min_area=config.min_object_area, max_area=config.max_object_area,
                          max_objects=config.max_num_objects):
    """
    Find the largest blob in a cleaned mask and work out its centre from its moments.

    Args:
        mask: Binary mask, usually the output of morph_ops()
        min_area: Blobs this size or smaller are ignored as noise
        max_area: Blobs this size or bigger are ignored as a bad filter
        max_objects: This many contours or more means the filter is too noisy to trust

    Returns:
        BlobResult: found/x/y/area of the winning blob, plus the contour count and noise flag
    """
    # findContours modifies its input on older OpenCV builds
    contours, hierarchy = cv2.findContours(mask.copy(), cv2.RETR_CCOMP, cv2.CHAIN_APPROX_SIMPLE)

    if hierarchy is None or len(contours) == 0:
        return BlobResult()

    num_objects = len(contours)
    if num_objects >= max_objects:
        logger.debug(f"{num_objects} contours, filter too noisy")
        return BlobResult(contour_count=num_objects, too_noisy=True)

    result = BlobResult(contour_count=num_objects)
    best_area = 0.0
    for contour, (_, _, _, parent) in zip(contours, hierarchy[0]):
        if parent != -1:
            continue  # hole inside another blob

        moment = cv2.moments(contour)
        area = moment['m00']
        if area <= min_area or area >= max_area:
            continue

        if area > best_area:
            best_area = area
            result.found = True
            result.x = int(moment['m10'] / area)
            result.y = int(moment['m01'] / area)
            result.area = area

    return result


def detect(hsv, hsv_range):
    """
    Run the whole threshold -> clean -> track chain for one colour range.
    The bad filter limit follows the size of the frame passed in.

    Returns:
        tuple: (BlobResult, raw mask, cleaned mask)
    """
    raw = threshold(hsv, hsv_range)
    cleaned = morph_ops(raw)
    height, width = hsv.shape[:2]
    max_area = height * width / config.bad_filter_divisor
    return track_filtered_object(cleaned, max_area=max_area), raw, cleaned
