#!/usr/bin/env python3
# /// script
# dependencies = ["hidapi>=0.14"]
# ///
"""
vialctl - set the RGB color of a Vial keyboard

Talks VialRGB over the keyboard's raw HID interface (usage page 0xFF60).
The keyboard must run Vial firmware built with VialRGB.

Usage:
    uv run vialctl.py <HEX_COLOR> [options]

Examples:
    vialctl.py ff00ff                     Magenta, saved to EEPROM
    vialctl.py '#00ff00' --no-save        Green until next power cycle
    vialctl.py ff0000 --brightness 80     Dim red
    vialctl.py ffffff --white-point 200,255,230
    vialctl.py --scan                     List raw HID interfaces

On Linux the hidraw node must be accessible to your user (udev rule).
"""

import sys
from vialrgb.cli import main

if __name__ == "__main__":
    sys.exit(main())
