"""Shared fakes for the HID layer.

No real keyboard required: FakeKeyboard answers VIA/Vial/VialRGB requests the
way the firmware does and records every frame written to it.
"""

import struct

import pytest

from vialrgb.device import RetryPolicy
from vialrgb.protocol import MSG_LEN, VIAL_SERIAL_NUMBER_MAGIC


class FakeKeyboard:
    """Stand-in for an open hid.device() talking to Vial firmware."""

    def __init__(self, effects=(1, 2, 3), rgb_version=1, vial_protocol=6, flags=0x01,
                 page_size=15, fail_save=False, silent=False):
        self.effects = sorted(effects)
        self.rgb_version = rgb_version
        self.vial_protocol = vial_protocol
        self.flags = flags
        self.page_size = page_size
        self.fail_save = fail_save
        self.silent = silent
        self.writes = []
        self.closed = False
        self._pending = None

    # hid.device() surface
    def write(self, frame):
        frame = bytes(frame)
        self.writes.append(frame)
        self._pending = None if self.silent else self._answer(frame[1:])
        return len(frame)

    def read(self, max_length, timeout_ms=0):
        reply, self._pending = self._pending, None
        return list(reply[:max_length]) if reply else []

    def close(self):
        self.closed = True

    # helpers for assertions
    @property
    def payloads(self):
        """Written frames with the report id stripped and trailing zeros trimmed."""
        return [f[1:].rstrip(b"\x00") for f in self.writes]

    def _answer(self, msg):
        reply = bytearray(MSG_LEN)
        if msg[0] == 0x01:
            reply[0:3] = bytes([0x01, 0x00, 0x09])
        elif msg[0:2] == b"\xfe\x00":
            struct.pack_into("<I", reply, 0, self.vial_protocol)
            reply[12] = self.flags
        elif msg[0:2] == b"\x08\x40":
            reply[0:2] = msg[0:2]
            struct.pack_into("<HB", reply, 2, self.rgb_version, 255)
        elif msg[0:2] == b"\x08\x42":
            cursor = struct.unpack_from("<H", msg, 2)[0]
            reply[0:2] = msg[0:2]
            following = [e for e in self.effects if e > cursor][:self.page_size]
            words = following + [0xFFFF] * (15 - len(following))
            struct.pack_into("<15H", reply, 2, *words)
        elif msg[0:2] == b"\x07\x41":
            reply[0:2] = msg[0:2]
        elif msg[0] == 0x09:
            if self.fail_save:
                return None
            reply[0] = 0x09
        else:
            reply[0] = 0xFF
        return bytes(reply)


class FakeHidModule:
    """Replacement for the `hid` module: routes open_path() to FakeKeyboards by path."""

    def __init__(self, keyboards, enumeration=()):
        self.keyboards = keyboards
        self.enumeration = list(enumeration)
        self.opened = []
        self.handles = []

    def enumerate(self, vid=0, pid=0):
        return list(self.enumeration)

    def device(self):
        handle = _FakeHandle(self)
        self.handles.append(handle)
        return handle


class _FakeHandle:
    def __init__(self, module):
        self._module = module
        self._kb = None
        self.closed = False

    def open_path(self, path):
        kb = self._module.keyboards.get(path)
        if kb is None:
            raise OSError("open failed")
        self._module.opened.append(path)
        self._kb = kb

    def write(self, frame):
        return self._kb.write(frame)

    def read(self, max_length, timeout_ms=0):
        return self._kb.read(max_length, timeout_ms)

    def close(self):
        self.closed = True


def make_desc(path=b"/dev/hidraw3", serial=f"{VIAL_SERIAL_NUMBER_MAGIC}abcdef",
              usage_page=0xFF60, usage=0x61, **extra):
    desc = {
        "path": path,
        "vendor_id": 0x4653,
        "product_id": 0x0001,
        "serial_number": serial,
        "manufacturer_string": "Acme",
        "product_string": "Board65",
        "usage_page": usage_page,
        "usage": usage,
        "interface_number": 1,
    }
    desc.update(extra)
    return desc


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def policy(sleeps):
    """Default retry policy with the clock replaced by a recorder."""
    return RetryPolicy(sleep=sleeps)


@pytest.fixture
def keyboard():
    return FakeKeyboard()
