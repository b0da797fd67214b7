"""
Display Module

On-screen window used to show processed frames.
"""

import cv2
import numpy as np


class WindowDisplay:
    """HighGUI window with a fixed title."""

    def __init__(self, title: str = "Vision"):
        self.title = title
        self._shown = False

    def show(self, frame: np.ndarray) -> None:
        cv2.imshow(self.title, frame)
        self._shown = True

    def wait(self, delay_ms: int) -> int:
        """Wait up to ``delay_ms`` for a key; 0 waits indefinitely. The key code is not interpreted."""
        return cv2.waitKey(int(delay_ms))

    def close(self) -> None:
        if self._shown:
            cv2.destroyAllWindows()
            self._shown = False

    def __enter__(self) -> "WindowDisplay":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
