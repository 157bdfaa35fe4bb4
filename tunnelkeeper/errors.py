"""Errors raised by the bootstrap pipeline stages."""


class TunnelError(Exception):
    """Base class for pipeline failures. ``stage`` names where it happened."""

    stage = "pipeline"


class DownloadError(TunnelError):
    """The release archive could not be downloaded."""

    stage = "download"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TooManyRedirects(DownloadError):
    """The redirect chain exceeded the configured limit."""


class ExtractionError(TunnelError):
    """The archive is malformed or could not be unpacked."""

    stage = "extract"


class LocatorMiss(TunnelError):
    """The tunnel binary was not found in the extracted tree."""

    stage = "locate"


class SpawnError(TunnelError):
    """The tunnel binary could not be executed."""

    stage = "launch"
