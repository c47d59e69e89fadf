"""Translate command-line sample groups into Prometheus exposition text"""
from .accumulator import RecordAccumulator, translate
from .errors import (
    ExpositionError,
    MalformedLabel,
    MissingBound,
    MissingName,
    MissingTotalCount,
    OutputError,
    TypeConflict,
    UnexpectedArgument,
)
from .formatter import escape_label_value, format_record
from .models import Bucket, Option, OptionKind, SeriesRecord

__all__ = [
    "RecordAccumulator",
    "translate",
    "ExpositionError",
    "MalformedLabel",
    "MissingBound",
    "MissingName",
    "MissingTotalCount",
    "OutputError",
    "TypeConflict",
    "UnexpectedArgument",
    "escape_label_value",
    "format_record",
    "Bucket",
    "Option",
    "OptionKind",
    "SeriesRecord",
]
