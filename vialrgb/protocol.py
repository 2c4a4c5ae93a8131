"""
VialRGB — wire constants, frame builders, and response decoders.
"""

import struct

# ── HID interface ────────────────────────────────────────────────────────
RAWHID_USAGE_PAGE = 0xFF60
RAWHID_USAGE      = 0x61

VIAL_SERIAL_NUMBER_MAGIC = "vial:f64c2b3c"

# ── Framing ──────────────────────────────────────────────────────────────
MSG_LEN   = 32
REPORT_ID = 0x00

# ── Identification probes ────────────────────────────────────────────────
CMD_VIA_GET_PROTOCOL_VERSION = 0x01
CMD_VIA_VIAL_PREFIX          = 0xFE
CMD_VIAL_GET_KEYBOARD_ID     = 0x00

RAWHID_SIGNATURE    = bytes([0x01, 0x00, 0x09])
VIAL_MIN_PROTOCOL   = 4
VIAL_FLAGS_OFFSET   = 12
VIAL_FLAG_VIALRGB   = 0x01

# ── Lighting commands ────────────────────────────────────────────────────
CMD_VIA_LIGHTING_SET_VALUE = 0x07
CMD_VIA_LIGHTING_GET_VALUE = 0x08
CMD_VIA_LIGHTING_SAVE      = 0x09

VIALRGB_GET_INFO      = 0x40
VIALRGB_SET_MODE      = 0x41
VIALRGB_GET_SUPPORTED = 0x42

VIALRGB_PROTOCOL_VERSION   = 1
VIALRGB_EFFECT_OFF         = 0
VIALRGB_EFFECT_SOLID_COLOR = 2
VIALRGB_EFFECT_END         = 0xFFFF

DEFAULT_EFFECT_SPEED    = 128
MAX_EFFECT_QUERY_ROUNDS = 100


# ── Frame builder ────────────────────────────────────────────────────────
def _build(msg):
    """Build the 33-byte HID output report for a payload of up to 32 bytes.

    Byte 0 is the report id, the payload follows, the rest is zero.
    Callers validate the length first.
    """
    f = bytearray(MSG_LEN + 1)
    f[0] = REPORT_ID
    f[1:1 + len(msg)] = msg
    return bytes(f)


# ── Request payloads ─────────────────────────────────────────────────────
def rawhid_probe():
    return bytes([CMD_VIA_GET_PROTOCOL_VERSION])


def vial_probe():
    return bytes([CMD_VIA_VIAL_PREFIX, CMD_VIAL_GET_KEYBOARD_ID])


def get_info_request():
    return struct.pack("BB", CMD_VIA_LIGHTING_GET_VALUE, VIALRGB_GET_INFO)


def get_supported_request(cursor):
    """Ask for the effects above `cursor` (LE u16 at payload offset 2)."""
    return struct.pack("<BBH", CMD_VIA_LIGHTING_GET_VALUE, VIALRGB_GET_SUPPORTED, cursor)


def set_mode_request(mode, speed, h, s, v):
    """8-byte set-mode payload: cmd, sub-cmd, LE effect id, speed, H, S, V."""
    return struct.pack("<BBHBBBB", CMD_VIA_LIGHTING_SET_VALUE, VIALRGB_SET_MODE,
                       mode, speed, h, s, v)


def save_request():
    return bytes([CMD_VIA_LIGHTING_SAVE])


# ── Response decoders ────────────────────────────────────────────────────
def _is_rawhid_reply(data):
    return bytes(data[0:3]) == RAWHID_SIGNATURE


def _is_vialrgb_reply(data):
    """Vial protocol (LE u32 at 0) >= 4 and the VialRGB flag at byte 12."""
    vial_protocol = struct.unpack_from("<I", data, 0)[0]
    flags = data[VIAL_FLAGS_OFFSET]
    return vial_protocol >= VIAL_MIN_PROTOCOL and (flags & VIAL_FLAG_VIALRGB) == VIAL_FLAG_VIALRGB


def _rgb_version(data):
    return struct.unpack_from("<H", data, 2)[0]


def _effect_words(data):
    """Yield the LE u16 words of a get-supported reply, starting at offset 2."""
    for i in range(2, MSG_LEN - 1, 2):
        yield data[i] | (data[i + 1] << 8)
