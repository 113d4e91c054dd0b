# -*- coding: utf-8 -*-
"""
Error kinds raised by the backtester.

Every error is raised by the component that first observes the violated
precondition and is never converted into a default value.
"""


class AlgotaError(Exception):
    """Base class for all backtester errors."""


class InvalidConfigurationError(AlgotaError, ValueError):
    """Non-positive balance or period, unknown indicator, unsupported interval."""


class InsufficientDataError(AlgotaError, ValueError):
    """Too few points to simulate, summarize, or compute an indicator."""


class MisalignedSeriesError(AlgotaError, ValueError):
    """Overlay is not an ordered suffix of the price series."""


class DegenerateSeriesError(AlgotaError, ValueError):
    """Zero, negative or non-finite value where a ratio or comparison is needed."""


class DataProviderError(AlgotaError):
    """Market data could not be retrieved or parsed."""
