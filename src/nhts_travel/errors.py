"""Exceptions raised by the NHTS pipeline stages."""


class PipelineError(Exception):
    """Base class for every failure that aborts a pipeline run."""


class NetworkError(PipelineError):
    """The survey archive could not be downloaded."""


class ArchiveError(PipelineError):
    """An expected entry is missing from the archive or cannot be read."""


class ParseError(PipelineError):
    """A table is not well-formed CSV or lacks a typed column it needs."""


class DivisionError(PipelineError, ZeroDivisionError):
    """A retained summary cell has zero household weight."""


class EmptySummaryError(PipelineError):
    """Every household was excluded or fell outside the charted mode tiers."""
