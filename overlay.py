import cv2

RED = (0, 0, 255)
GREEN = (0, 255, 0)
FONT = cv2.FONT_HERSHEY_PLAIN


def draw_object(frame, x, y):
    """Places a small circle on the object."""
    cv2.circle(frame, (x, y), 10, RED)
    cv2.putText(frame, f"{x} , {y}", (x, y + 20), FONT, 1, GREEN)


def _draw_marker(frame, x, y):
    cv2.circle(frame, (x, y), 10, RED)
    cv2.putText(frame, f"({x},{y})", (x, y + 20), FONT, 1, GREEN)


def draw_ball(frame, ball):
    _draw_marker(frame, ball.x, ball.y)
    cv2.putText(frame, "Ball", (ball.x + 25, ball.y + 35), FONT, 1, GREEN)


def draw_robot(frame, robot):
    x, y = robot.x, robot.y
    _draw_marker(frame, x, y)
    cv2.putText(frame, "Robot", (x + 20, y + 35), FONT, 1, GREEN)
    cv2.putText(frame, f"Team {robot.team}", (x + 20, y + 60), FONT, 1, GREEN)
    cv2.putText(frame, f"angle: {robot.angle}", (x + 20, y + 75), FONT, 1, GREEN)


def draw_all_robots(frame, robots):
    for robot in robots:
        draw_robot(frame, robot)


def draw_noise_warning(frame):
    cv2.putText(frame, "TOO MUCH NOISE! ADJUST FILTER", (0, 50), FONT, 2, RED, 2)
