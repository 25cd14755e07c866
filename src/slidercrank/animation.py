"""
Crank animation task.

The animator advances the crank angle from wall-clock time. It is driven by
an external periodic callback (a QTimer in the UI) that calls tick(); start()
hands out a handle and stop() invalidates it, after which tick() returns
without touching the angle.
"""

import itertools
import logging
import time

from .kinematics import step_angle

logger = logging.getLogger(__name__)


class AnimationHandle:
    """Token for one run of the animation."""

    _ids = itertools.count(1)

    def __init__(self):
        self.id = next(self._ids)
        self.active = True
        self.last_time = None

    def cancel(self):
        self.active = False

    def __repr__(self):
        return f"AnimationHandle(id={self.id}, active={self.active})"


class CrankAnimator:
    """
    Steps the crank angle at the current angular velocity.

    get_velocity() -> rad/s, get_angle() -> deg and set_angle(deg) connect the
    animator to whoever owns the configuration. clock returns seconds.
    """

    def __init__(self, get_velocity, get_angle, set_angle, clock=time.monotonic):
        self.get_velocity = get_velocity
        self.get_angle = get_angle
        self.set_angle = set_angle
        self.clock = clock
        self.handle = None

    @property
    def running(self):
        return self.handle is not None and self.handle.active

    def start(self):
        """Begin a new run. Any previous handle is invalidated."""
        if self.handle is not None:
            self.handle.cancel()
        self.handle = AnimationHandle()
        logger.debug("animation started: %r", self.handle)
        return self.handle

    def stop(self):
        if self.handle is not None:
            self.handle.cancel()
            logger.debug("animation stopped: %r", self.handle)
        self.handle = None

    def reset_baseline(self):
        """Make the next tick a zero-length step (e.g. after omega changes)."""
        if self.handle is not None:
            self.handle.last_time = None

    def tick(self, handle=None, now=None):
        """
        Advance one frame. Returns the new angle, or None if nothing moved
        (stale handle, or the first tick of a run).
        """
        handle = handle if handle is not None else self.handle
        if handle is None or not handle.active or handle is not self.handle:
            return None

        now = self.clock() if now is None else now
        last = handle.last_time
        handle.last_time = now
        if last is None:
            return None

        dt = now - last
        new_angle = step_angle(self.get_angle(), self.get_velocity(), dt)
        self.set_angle(new_angle)
        return new_angle
