"""
VialRGB — exception types raised by the color math, transport and protocol layers.
"""


class VialError(Exception):
    """Base class; the CLI reports any of these as a single error line."""


class InvalidInput(VialError, ValueError):
    """Bad user input, detected before any device I/O."""


class ProtocolError(InvalidInput):
    """A request that cannot be framed (payload longer than 32 bytes)."""


class DeviceNotFound(VialError):
    pass


class CommunicationError(VialError):
    """The device could not be opened or stopped answering."""


class SaveFailed(CommunicationError):
    """The color was applied but committing it to EEPROM failed."""


class UnsupportedProtocol(VialError):
    pass


class UnsupportedEffect(VialError):
    pass


class TooManyEffects(VialError):
    pass
