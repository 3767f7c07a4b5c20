"""Gesture Executor - Click and drag gestures built on BrowserController.

Gestures against the live, animating client are racy. Failures are reported
as booleans and never raised; the caller's retry policy decides what happens
next.
"""

import time
import logging

import config
from game_profile import ViewportGeometry

logger = logging.getLogger(__name__)


class GestureExecutor:
    """Synthesize pointer down/move/up sequences.

    Invariant: after every public method returns, ``button_held`` is False
    unless the surface rejected every mouse-up, in which case it stays True
    and the next release retries.
    """

    def __init__(self, controller, geometry: ViewportGeometry | None = None,
                 drag_steps: int = None) -> None:
        self.controller = controller
        self.geometry = geometry or ViewportGeometry()
        self.drag_steps = drag_steps or config.DRAG_STEPS
        self.button_held = False

    def click(self, x: int, y: int) -> bool:
        """Single down+up at (x, y)."""
        try:
            self.controller.click(x, y)
            return True
        except Exception as e:
            logger.warning(f"Click at ({x}, {y}) failed: {e}")
            return False

    def click_many(self, points: list[tuple[int, int]], pause: float = 0.2) -> int:
        """Click each candidate point in order. Returns clicks dispatched."""
        clicked = 0
        for x, y in points:
            if self.click(x, y):
                clicked += 1
            time.sleep(pause)
        return clicked

    def release(self) -> bool:
        """Release the pointer button if held. Never raises.

        Returns True if no button is held afterwards.
        """
        if not self.button_held:
            return True
        try:
            self.controller.mouse_up()
        except Exception as e:
            logger.warning(f"Mouse up failed, button may still be held: {e}")
            return False
        self.button_held = False
        return True

    def reset(self) -> None:
        """Cancel a stuck gesture: release, then click the two safe zones."""
        self.release()
        for x, y in self.geometry.points("reset"):
            try:
                self.controller.click(x, y)
            except Exception as e:
                logger.debug(f"Reset click at ({x}, {y}) failed: {e}")
            time.sleep(config.RESET_CLICK_DELAY)

    def drag(self, origin_x: int, origin_y: int,
             dest_x: int, dest_y: int) -> bool:
        """Slow, deliberate drag from origin to destination.

        Returns True if the mechanical gesture completed. This does not
        confirm that the game accepted the action.
        """
        logger.debug(f"Drag from ({origin_x},{origin_y}) to ({dest_x},{dest_y})")
        try:
            self.reset()
            time.sleep(0.2)

            # Approach
            self.controller.mouse_move(origin_x, origin_y)
            time.sleep(0.5)

            # Press
            self.button_held = True
            self.controller.mouse_down()
            time.sleep(0.3)

            # Travel: linear steps, a jump straight to the target is
            # ignored by the client as a mis-click
            for step in range(1, self.drag_steps + 1):
                progress = step / self.drag_steps
                x = origin_x + (dest_x - origin_x) * progress
                y = origin_y + (dest_y - origin_y) * progress
                self.controller.mouse_move(round(x), round(y))
                time.sleep(config.DRAG_STEP_DELAY)

            # Hold
            self.controller.mouse_move(dest_x, dest_y)
            time.sleep(config.DRAG_HOLD)

            # Release and confirm
            self.controller.mouse_up()
            self.button_held = False
            time.sleep(config.DRAG_RELEASE_SETTLE)
            cx, cy = self.geometry.point("drag_confirm")
            self.controller.click(cx, cy)
            time.sleep(0.5)
            return True
        except Exception as e:
            logger.warning(f"Drag failed: {e}")
            self.reset()
            return False
