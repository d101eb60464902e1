"""Exception types raised by alphamerge.

All errors derive from ``AlphaMergeError`` and additionally from the builtin
exception a caller would expect (``ValueError``, ``LookupError``).
"""

from typing import Optional


class AlphaMergeError(Exception):
    """Base class for all alphamerge errors."""


class InvalidParameter(AlphaMergeError, ValueError):
    """A configuration value is out of range or unknown."""


class InvalidInput(AlphaMergeError, ValueError):
    """Input data cannot be processed (e.g. clustering zero points)."""


class MissingInformation(AlphaMergeError, LookupError):
    """Required information is missing from a spectrum.

    Parameters
    ----------
    message : str
        Human readable description
    index : int, optional
        Index of the offending spectrum in its experiment
    """

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index
