"""Frame stabilization protocol for flaky live devices.

Right after a camera is opened, the first frames are often empty or
corrupt while the driver initializes, and some devices (virtual cameras
in particular) emit valid-looking but entirely black frames during
warm-up. ``read_stable_frame()`` layers a skip, retry and validate loop
over a raw read so callers get a usable frame.

The protocol is best effort: when the retry budget runs out, the last
frame read is returned (possibly None or black) and the caller decides
what to do with it, unless the policy asks for strict behavior.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import numpy as np

from imagechain.capture.base import DegenerateFrameError
from imagechain.domain.models import StabilizationPolicy
from imagechain.utils.imaging import is_empty, max_channel_mean

logger = logging.getLogger(__name__)

BRIGHTNESS_FLOOR = 5.0

FrameReader = Callable[[], np.ndarray | None]


def is_black_frame(frame: np.ndarray | None, threshold: float = BRIGHTNESS_FLOOR) -> bool:
    """Whether no channel's mean intensity exceeds ``threshold`` (0-255)."""
    return max_channel_mean(frame) <= threshold


def read_stable_frame(
    read: FrameReader,
    policy: StabilizationPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> np.ndarray | None:
    """Read frames until one passes validation or the budget runs out.

    1. ``policy.skip_frames`` reads are discarded unconditionally, with
       ``skip_delay`` between them (not after the last one).
    2. Up to ``policy.retries`` reads follow. Empty frames are retried
       after ``retry_delay``. With ``validate_non_black`` a frame is
       accepted only when its largest channel mean exceeds
       ``black_threshold``; otherwise the first non-empty frame wins.
    3. On exhaustion the last frame read is returned.

    Args:
        read: Blocking raw read returning a frame or None.
        policy: Protocol tuning; defaults to ``StabilizationPolicy()``.
        sleep: Blocking delay function, injectable for tests.

    Raises:
        DegenerateFrameError: On exhaustion, only if ``policy.strict``.
    """
    if policy is None:
        policy = StabilizationPolicy()

    frame: np.ndarray | None = None

    for i in range(policy.skip_frames):
        frame = read()
        if i < policy.skip_frames - 1:
            sleep(policy.skip_delay)
    if policy.skip_frames:
        logger.debug("Skipped %d warm-up frame(s)", policy.skip_frames)

    for attempt in range(1, policy.retries + 1):
        frame = read()
        if is_empty(frame):
            logger.debug("Attempt %d/%d: empty frame", attempt, policy.retries)
        elif not policy.validate_non_black:
            return frame
        else:
            brightness = max_channel_mean(frame)
            if brightness > policy.black_threshold:
                logger.debug(
                    "Attempt %d/%d: accepted frame (max channel mean %.1f)",
                    attempt, policy.retries, brightness,
                )
                return frame
            logger.debug(
                "Attempt %d/%d: black frame (max channel mean %.1f)",
                attempt, policy.retries, brightness,
            )
        sleep(policy.retry_delay)

    message = (
        f"No acceptable frame after {policy.skip_frames} skipped and "
        f"{policy.retries} attempted read(s)"
    )
    if policy.strict:
        raise DegenerateFrameError(message, last_frame=frame)
    logger.warning("%s; returning last %s frame", message, "empty" if is_empty(frame) else "black")
    return frame
