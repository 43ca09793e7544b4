"""Terminal errors raised while preparing a flight log for projection.

Every failure here is a deterministic consequence of the input files, so
nothing is retried: the message is reported once and the user supplies
corrected input.
"""


class OverlayError(ValueError):
    """Base class for flight log / overlay processing failures."""


class MalformedInput(OverlayError):
    """The flight log cannot be decoded as tabular text."""


class EmptyResult(OverlayError):
    """No telemetry records were recorded during the video phase."""


class NoValidCoordinates(OverlayError):
    """None of the telemetry records carries a finite latitude/longitude."""
