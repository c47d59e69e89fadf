"""Errors raised while translating options into exposition text"""
from typing import Optional

from .models import Option


class ExpositionError(Exception):
    """Base class for validation and usage failures (exit code 1)"""

    def __init__(self, message: str, option: Optional[Option] = None):
        self.option = option
        if option is not None:
            message = f"{message} (at {option})"
        super().__init__(message)


class MissingName(ExpositionError):
    """--value seen while no metric name is set"""


class TypeConflict(ExpositionError):
    """Histogram option used while a different metric type is set"""


class MissingBound(ExpositionError):
    """--count seen without a preceding unmatched --le"""


class MissingTotalCount(ExpositionError):
    """Histogram sample emitted without --total-count"""


class UnexpectedArgument(ExpositionError):
    """Stray token where an option or the end of input was expected"""


class MalformedLabel(ExpositionError):
    """--label argument that is not of the form name=value"""


class OutputError(Exception):
    """Writing the rendered text failed (exit code 2)"""
