"""
VialRGB — HID handle management and framed request/response transactions.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable

import hid

from vialrgb.errors import CommunicationError, ProtocolError
from vialrgb.protocol import MSG_LEN, _build

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How hard to try before giving up on a device.

    attempts:   write+read attempts per message.
    delay:      fixed pause between attempts, in seconds (never before the first).
    timeout_ms: per-read timeout.
    sleep:      clock used for the pause; tests swap in a recorder.
    """

    attempts: int = 20
    delay: float = 0.5
    timeout_ms: int = 1000
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)


DEFAULT_POLICY = RetryPolicy()


def hid_send(dev, msg, retries=None, policy=None):
    """Send one message and return the 32-byte reply.

    Args:
        dev:     open hid.device().
        msg:     payload, at most 32 bytes.
        retries: attempts for this message; defaults to policy.attempts.
        policy:  RetryPolicy supplying the delay, timeout and clock;
                 DEFAULT_POLICY when None.

    Raises:
        ProtocolError:      msg longer than 32 bytes (nothing is sent).
        CommunicationError: every attempt failed.
    """
    if len(msg) > MSG_LEN:
        raise ProtocolError(f"message must be <= {MSG_LEN} bytes, got {len(msg)}")

    if policy is None:
        policy = DEFAULT_POLICY
    attempts = policy.attempts if retries is None else retries
    frame = _build(msg)
    last_err = None

    for attempt in range(attempts):
        if attempt > 0:
            policy.sleep(policy.delay)

        try:
            written = dev.write(frame)
        except (OSError, ValueError) as e:
            log.debug("write failed (attempt %d/%d): %s", attempt + 1, attempts, e)
            last_err = e
            continue
        if written is not None and written < 0:
            log.debug("write failed (attempt %d/%d)", attempt + 1, attempts)
            continue

        try:
            data = dev.read(MSG_LEN, timeout_ms=policy.timeout_ms)
        except (OSError, ValueError) as e:
            log.debug("read failed (attempt %d/%d): %s", attempt + 1, attempts, e)
            last_err = e
            continue

        if data:
            return bytes(data[:MSG_LEN]).ljust(MSG_LEN, b"\x00")
        log.debug("read timed out (attempt %d/%d)", attempt + 1, attempts)

    if last_err is not None:
        raise CommunicationError(
            f"failed to communicate with device after {attempts} attempts: {last_err}"
        ) from last_err
    raise CommunicationError(f"failed to communicate with device after {attempts} attempts")


@contextmanager
def open_device(desc):
    """Open the HID endpoint described by an hid.enumerate() entry.

    The handle is closed when the block exits, however it exits.
    """
    dev = hid.device()
    try:
        try:
            dev.open_path(desc["path"])
        except OSError as e:
            raise CommunicationError(f"cannot open HID device {desc['path']!r}: {e}") from e
        yield dev
    finally:
        dev.close()
