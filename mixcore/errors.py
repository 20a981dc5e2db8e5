"""Exceptions raised by mixcore."""


class MixcoreError(Exception):
    """Base class for all mixcore errors."""


class DecodeError(MixcoreError):
    """Audio input could not be decoded into a mono PCM buffer.

    Fatal to the single analysis call that raised it, never to the process.
    """


class TapClosedError(MixcoreError):
    """A snapshot was requested from an analysis tap that has been released."""
