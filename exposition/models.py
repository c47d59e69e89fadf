"""Option and series record data models"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum


UNTYPED = "UNTYPED"
HISTOGRAM = "histogram"
INF_BOUND = "+Inf"


class OptionKind(Enum):
    """Flags understood by the record accumulator"""
    NAME = "name"
    TYPE = "type"
    COMMENT = "comment"
    LABEL = "label"
    TIMESTAMP = "timestamp"
    LE = "le"
    COUNT = "count"
    TOTAL_COUNT = "total-count"
    VALUE = "value"
    END = "end"
    ARGUMENT = "argument"

    @property
    def flag(self) -> str:
        """Command-line spelling of the option"""
        if self in (OptionKind.END, OptionKind.ARGUMENT):
            return self.value
        return f"--{self.value}"


@dataclass(frozen=True)
class Option:
    """One (flag, argument) pair taken from the command line, in order"""
    kind: OptionKind
    argument: Optional[str] = None

    def __str__(self) -> str:
        if self.kind == OptionKind.ARGUMENT:
            return repr(self.argument)
        if self.argument is None:
            return self.kind.flag
        return f"{self.kind.flag} {self.argument}"


@dataclass(frozen=True)
class Bucket:
    """Histogram bucket: upper bound and cumulative count, both verbatim"""
    bound: str
    count: str


@dataclass(frozen=True)
class SeriesRecord:
    """A completed sample group handed to the line formatter"""
    name: str
    value: str
    metric_type: str = UNTYPED
    comment: str = ""
    labels: Tuple[Tuple[str, str], ...] = ()
    timestamp: str = ""
    buckets: Tuple[Bucket, ...] = ()
    total_count: Optional[str] = None

    @property
    def is_histogram(self) -> bool:
        return self.metric_type == HISTOGRAM


@dataclass
class TranslationResult:
    """Buffered output of one run"""
    lines: List[str] = field(default_factory=list)
    records: int = 0
    headers: int = 0

    def to_text(self) -> str:
        """Join lines into the exposition text, newline terminated"""
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"
