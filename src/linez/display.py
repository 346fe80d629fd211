"""
Display sinks for the live preview.

A sink receives RGB canvas snapshots and reports whether the user asked to
quit. The OpenCV window quits on Escape or when it is closed; the headless
sink never quits on its own and relies on Ctrl-C.
"""

import time

import cv2

ESCAPE_KEY = 27


def prepare_frame(rgb, scale=1):
    """Convert an RGB snapshot to a BGR frame, upscaled with nearest neighbour."""
    bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
    if scale and scale > 1:
        height, width = bgr.shape[:2]
        bgr = cv2.resize(bgr, (width * scale, height * scale), interpolation=cv2.INTER_NEAREST)
    return bgr


class WindowSink:
    """Preview window backed by cv2.imshow."""

    def __init__(self, title="linez", scale=1):
        self.title = title
        self.scale = scale
        self._opened = False

    def __enter__(self):
        cv2.namedWindow(self.title, cv2.WINDOW_AUTOSIZE)
        self._opened = True
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._opened:
            cv2.destroyWindow(self.title)
            self._opened = False
        return False

    def show(self, rgb):
        cv2.imshow(self.title, prepare_frame(rgb, self.scale))

    def poll_quit(self, delay_ms=1):
        """Pump window events for delay_ms; True on Escape or window close."""
        key = cv2.waitKey(max(1, delay_ms)) & 0xFF
        if key == ESCAPE_KEY:
            return True
        return cv2.getWindowProperty(self.title, cv2.WND_PROP_VISIBLE) < 1


class HeadlessSink:
    """Sink for runs without a display; frames are counted, not shown."""

    def __init__(self):
        self.frames_shown = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def show(self, rgb):
        self.frames_shown += 1

    def poll_quit(self, delay_ms=1):
        time.sleep(delay_ms / 1000.0)
        return False


def make_sink(display_config):
    """Pick a sink for the display configuration."""
    if display_config.headless:
        return HeadlessSink()
    return WindowSink(title=display_config.window_title, scale=display_config.scale)
