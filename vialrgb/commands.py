"""
VialRGB — command implementations. Each returns a process exit code.
"""

import sys

from vialrgb.color import parse_hex_rgb, rgb_to_hsv
from vialrgb.config import load_config
from vialrgb.device import open_device
from vialrgb.discovery import find_device, list_candidates
from vialrgb.errors import DeviceNotFound, SaveFailed, VialError
from vialrgb.lighting import set_solid_color


def _error(msg):
    print(f"Error: {msg}", file=sys.stderr)


def cmd_scan():
    print("Scanning for raw HID interfaces...")
    print("=" * 60)
    candidates = list_candidates()
    if not candidates:
        print("  No raw HID interface found.")
        return 1
    for d, is_vial in candidates:
        tag = " ** vial **" if is_vial else ""
        print(f"  {d.get('manufacturer_string') or '?'} {d.get('product_string') or '?'}"
              f"  (0x{d['vendor_id']:04X}:0x{d['product_id']:04X}"
              f" iface={d.get('interface_number', -1)}){tag}")
    return 0


def _resolve_white_point(white_point):
    """CLI override wins over the config file."""
    if white_point is not None:
        return white_point
    return load_config().white_point


def cmd_set_color(color, brightness=None, persist=True, white_point=None):
    """Set the keyboard to a solid color.

    Args:
        color:       'RRGGBB' or '#RRGGBB'.
        brightness:  0-255, replaces the V component when given.
        persist:     save to EEPROM after applying.
        white_point: WhitePoint from the command line, or None to use the config.
    """
    try:
        r, g, b = parse_hex_rgb(color)
    except VialError as e:
        _error(e)
        return 1

    wp = _resolve_white_point(white_point)
    if wp is not None:
        corrected = wp.apply(r, g, b)
        print(f"Color correction: white_point = {wp.as_list()}, "
              f"RGB({r},{g},{b}) -> RGB({corrected[0]},{corrected[1]},{corrected[2]})")
        r, g, b = corrected

    hue, sat, val = rgb_to_hsv(r, g, b)
    if brightness is not None:
        if brightness == 0:
            print("warning: brightness 0 will turn the LEDs off", file=sys.stderr)
        val = brightness

    try:
        info = find_device()
        if info is None:
            raise DeviceNotFound("no Vial RGB device found")

        print(f"Found: {info.get('manufacturer_string') or '?'} {info.get('product_string') or '?'}")
        print(f"Setting color to #{color.removeprefix('#')} (HSV: {hue}, {sat}, {val})")

        with open_device(info) as dev:
            set_solid_color(dev, hue, sat, val, persist=persist)
    except SaveFailed as e:
        _error(f"{e}\n  The new color is active but will be lost on power cycle.")
        return 1
    except VialError as e:
        _error(e)
        return 1

    if persist:
        print("Done! (saved to EEPROM)")
    else:
        print("Done! (not saved to EEPROM)")
    return 0
