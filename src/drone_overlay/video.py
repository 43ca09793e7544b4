"""Video player boundary.

Decoding is delegated to whatever media stack hosts the overlay; the
synchronizer only reads frame size and playback time and sets the two
fixed player defaults.
"""

from __future__ import annotations

from typing import Protocol


class VideoHandle(Protocol):
    width: int
    """Frame width in pixels, 0 until the player has loaded metadata."""
    height: int
    current_time: float
    """Playback position in seconds."""
    loop: bool
    playback_rate: float


class SimulatedVideo:
    """Playback clock for a video of known size and duration.

    Stands in for a real player when footprints are computed offline.
    """

    def __init__(
        self,
        width: int,
        height: int,
        duration_s: float,
        loop: bool = False,
        playback_rate: float = 1.0,
    ):
        self.width = width
        self.height = height
        self.duration_s = duration_s
        self.current_time = 0.0
        self.loop = loop
        self.playback_rate = playback_rate

    @property
    def ended(self) -> bool:
        return not self.loop and self.current_time >= self.duration_s

    def advance(self, wall_dt: float) -> float:
        """Move playback forward by ``wall_dt`` seconds of wall-clock time."""
        t = self.current_time + wall_dt * self.playback_rate
        if t >= self.duration_s:
            t = t % self.duration_s if self.loop and self.duration_s > 0 else self.duration_s
        self.current_time = t
        return t

    def seek(self, t: float) -> None:
        self.current_time = max(0.0, min(t, self.duration_s))
