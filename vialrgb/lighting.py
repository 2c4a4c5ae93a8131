"""
VialRGB — lighting protocol: supported effects, set mode, save.

All three requests go through the VIA lighting get/set/save commands with a
VialRGB sub-command in byte 1.
"""

import logging

from vialrgb.device import hid_send
from vialrgb.errors import CommunicationError, SaveFailed, TooManyEffects, UnsupportedEffect, UnsupportedProtocol
from vialrgb.protocol import (DEFAULT_EFFECT_SPEED, MAX_EFFECT_QUERY_ROUNDS, VIALRGB_EFFECT_END,
                              VIALRGB_EFFECT_OFF, VIALRGB_EFFECT_SOLID_COLOR,
                              VIALRGB_PROTOCOL_VERSION, get_info_request, get_supported_request,
                              save_request, set_mode_request, _effect_words, _rgb_version)

log = logging.getLogger(__name__)

QUERY_ATTEMPTS = 3


def get_modes(dev, policy=None):
    """Return the set of effect ids the keyboard supports.

    The device lists its effects in pages: each request carries the highest
    id seen so far and the reply holds the next ids as LE u16 words, ending
    with 0xFFFF once the list is exhausted. A 0xFFFF word ends the scan; it
    and everything after it in that reply are padding.

    Raises:
        UnsupportedProtocol: VialRGB version other than 1.
        TooManyEffects:      no terminator within MAX_EFFECT_QUERY_ROUNDS pages.
    """
    data = hid_send(dev, get_info_request(), retries=20, policy=policy)
    rgb_version = _rgb_version(data)
    if rgb_version != VIALRGB_PROTOCOL_VERSION:
        raise UnsupportedProtocol(f"unsupported VialRGB protocol ({rgb_version})")

    effects = {VIALRGB_EFFECT_OFF}
    max_effect = 0

    for round_no in range(MAX_EFFECT_QUERY_ROUNDS):
        data = hid_send(dev, get_supported_request(max_effect), retries=QUERY_ATTEMPTS, policy=policy)

        for value in _effect_words(data):
            if value == VIALRGB_EFFECT_END:
                max_effect = VIALRGB_EFFECT_END
                break
            effects.add(value)
            max_effect = max(max_effect, value)

        log.debug("effects round %d: %d known, cursor=0x%04X", round_no, len(effects), max_effect)
        if max_effect == VIALRGB_EFFECT_END:
            return effects

    raise TooManyEffects(
        f"device reported too many effects (>{MAX_EFFECT_QUERY_ROUNDS} rounds without terminator)"
    )


def set_mode(dev, mode, speed, h, s, v, policy=None):
    hid_send(dev, set_mode_request(mode, speed, h, s, v), retries=20, policy=policy)


def save(dev, policy=None):
    """Commit the current lighting settings to EEPROM."""
    hid_send(dev, save_request(), retries=20, policy=policy)


def set_solid_color(dev, h, s, v, persist=True, policy=None):
    """Switch the keyboard to the solid-color effect with the given HSV.

    Without persist the change is lost on power cycle. If saving fails after
    the mode was set, SaveFailed is raised and the new color stays applied;
    the protocol has no way to undo it.
    """
    modes = get_modes(dev, policy=policy)
    if VIALRGB_EFFECT_SOLID_COLOR not in modes:
        raise UnsupportedEffect("keyboard doesn't support solid color effect")

    set_mode(dev, VIALRGB_EFFECT_SOLID_COLOR, DEFAULT_EFFECT_SPEED, h, s, v, policy=policy)

    if persist:
        try:
            save(dev, policy=policy)
        except CommunicationError as e:
            raise SaveFailed(f"color applied but not saved to EEPROM: {e}") from e
