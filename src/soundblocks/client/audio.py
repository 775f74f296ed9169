from __future__ import annotations


class Voices:
    """
    Oscillator bank keyed by block id.

    A real backend keeps one oscillator per block running at zero gain and schedules a short
    gain envelope on `pluck`. This base class is silent; subclass it to make noise.
    """

    def start(self, block_id: int, kind: str) -> None:
        pass

    def set_kind(self, block_id: int, kind: str) -> None:
        pass

    def pluck(self, block_id: int) -> None:
        pass

    def stop(self, block_id: int) -> None:
        pass
