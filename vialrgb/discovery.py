"""
VialRGB — find the Vial raw-HID interface among everything the host enumerates.

A keyboard usually exposes several HID collections (keyboard, consumer
control, mouse, raw HID...) and the system has other devices besides. Each
endpoint is checked with three predicates, cheapest first:

    1. serial number carries the Vial magic
    2. raw-HID usage page/usage, and it answers the VIA protocol probe
    3. Vial protocol >= 4 with the VialRGB flag set

Endpoints that cannot be opened or do not answer simply don't match.
"""

import enum
import logging

import hid

from vialrgb.device import RetryPolicy, hid_send, open_device
from vialrgb.errors import CommunicationError
from vialrgb.protocol import (RAWHID_USAGE_PAGE, RAWHID_USAGE, VIAL_SERIAL_NUMBER_MAGIC,
                              rawhid_probe, vial_probe, _is_rawhid_reply, _is_vialrgb_reply)

log = logging.getLogger(__name__)

PROBE_ATTEMPTS = 3
PROBE_POLICY = RetryPolicy(attempts=PROBE_ATTEMPTS)


class Probe(enum.Enum):
    MATCH = "match"
    NO_MATCH = "no-match"
    FAILED = "probe-failed"


def _probe(desc, msg, check, policy=None):
    """Open the endpoint, send one message and classify the reply."""
    if policy is None:
        policy = PROBE_POLICY
    try:
        with open_device(desc) as dev:
            data = hid_send(dev, msg, retries=policy.attempts, policy=policy)
    except CommunicationError as e:
        log.debug("probe %s on %r failed: %s", msg.hex(), desc.get("path"), e)
        return Probe.FAILED
    return Probe.MATCH if check(data) else Probe.NO_MATCH


def has_vial_serial(desc):
    return VIAL_SERIAL_NUMBER_MAGIC in (desc.get("serial_number") or "")


def is_rawhid_interface(desc):
    return desc.get("usage_page") == RAWHID_USAGE_PAGE and desc.get("usage") == RAWHID_USAGE


def is_rawhid(desc, policy=None):
    if not is_rawhid_interface(desc):
        return False
    return _probe(desc, rawhid_probe(), _is_rawhid_reply, policy) is Probe.MATCH


def is_vialrgb(desc, policy=None):
    return _probe(desc, vial_probe(), _is_vialrgb_reply, policy) is Probe.MATCH


def find_device(devices=None, policy=None):
    """Return the first Vial keyboard with VialRGB, or None.

    Args:
        devices: hid.enumerate()-style list; enumerates the host when None.
    """
    if devices is None:
        devices = hid.enumerate()

    for desc in devices:
        if has_vial_serial(desc) and is_rawhid(desc, policy) and is_vialrgb(desc, policy):
            log.debug("selected %r (%s %s)", desc.get("path"),
                      desc.get("manufacturer_string"), desc.get("product_string"))
            return desc
    return None


def list_candidates(devices=None):
    """Raw-HID endpoints, each paired with whether its serial has the Vial magic.

    No device is opened; this is only for the --scan listing.
    """
    if devices is None:
        devices = hid.enumerate()
    return [(desc, has_vial_serial(desc)) for desc in devices if is_rawhid_interface(desc)]
