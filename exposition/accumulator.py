"""Record accumulator: folds the ordered option stream into series records"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from logging_config import get_logger
from .errors import (
    MalformedLabel,
    MissingBound,
    MissingName,
    MissingTotalCount,
    TypeConflict,
    UnexpectedArgument,
)
from .formatter import format_record
from .models import (
    Bucket,
    HISTOGRAM,
    INF_BOUND,
    Option,
    OptionKind,
    SeriesRecord,
    TranslationResult,
    UNTYPED,
)


logger = get_logger(__name__)


@dataclass
class SampleState:
    """Fields of the sample group currently being formed"""
    name: str = ""
    metric_type: str = ""
    comment: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    timestamp: str = ""
    buckets: List[Bucket] = field(default_factory=list)
    pending_bound: Optional[str] = None
    total_count: Optional[str] = None
    total_index: Optional[int] = None
    histogram_seen: bool = False

    @property
    def effective_type(self) -> str:
        """Explicit type, else histogram once a bucket option was seen, else untyped"""
        if self.metric_type:
            return self.metric_type
        if self.histogram_seen:
            return HISTOGRAM
        return UNTYPED

    def clear_sample_fields(self) -> None:
        self.timestamp = ""
        self.labels = {}

    def set_name(self, name: str) -> None:
        self.name = name
        self.clear_sample_fields()

    def set_type(self, metric_type: str) -> None:
        self.metric_type = metric_type
        self.clear_sample_fields()

    def set_comment(self, comment: str) -> None:
        self.comment = comment
        self.clear_sample_fields()

    def add_label(self, name: str, value: str) -> None:
        self.labels[name] = value
        self.timestamp = ""

    def set_timestamp(self, timestamp: str) -> None:
        self.timestamp = timestamp

    def reset_after_emit(self) -> None:
        """Drop everything but the name and labels once a sample is written"""
        self.timestamp = ""
        self.comment = ""
        self.metric_type = ""
        self.buckets = []
        self.pending_bound = None
        self.total_count = None
        self.total_index = None
        self.histogram_seen = False


class RecordAccumulator:
    """Walks options in order and streams finished records to the formatter.

    Header suppression only looks at the previous emission: a name repeated
    after a different name gets its HELP/TYPE block again.
    """

    def __init__(self, sort_labels: bool = False):
        self.sort_labels = sort_labels
        self.state = SampleState()
        self.last_emitted_name: Optional[str] = None
        self.result = TranslationResult()
        self._ended = False
        self._handlers: Dict[OptionKind, Callable[[Option], None]] = {
            OptionKind.NAME: self._on_name,
            OptionKind.TYPE: self._on_type,
            OptionKind.COMMENT: self._on_comment,
            OptionKind.LABEL: self._on_label,
            OptionKind.TIMESTAMP: self._on_timestamp,
            OptionKind.LE: self._on_le,
            OptionKind.COUNT: self._on_count,
            OptionKind.TOTAL_COUNT: self._on_total_count,
            OptionKind.VALUE: self._on_value,
            OptionKind.END: self._on_end,
        }

    def consume(self, options: Iterable[Option]) -> TranslationResult:
        """Apply every option; a missing terminator is treated as end of input"""
        for option in options:
            self.apply(option)
        self._ended = True
        return self.result

    def apply(self, option: Option) -> None:
        if self._ended:
            raise UnexpectedArgument("unexpected argument after end of options", option)
        handler = self._handlers.get(option.kind)
        if handler is None:
            raise UnexpectedArgument("unexpected argument", option)
        logger.debug("Applying option", option=str(option))
        handler(option)

    def _on_name(self, option: Option) -> None:
        self.state.set_name(option.argument or "")

    def _on_type(self, option: Option) -> None:
        self.state.set_type(option.argument or "")

    def _on_comment(self, option: Option) -> None:
        self.state.set_comment(option.argument or "")

    def _on_label(self, option: Option) -> None:
        raw = option.argument or ""
        name, sep, value = raw.partition("=")
        if not sep or not name:
            raise MalformedLabel("label must be given as name=value", option)
        self.state.add_label(name, value)

    def _on_timestamp(self, option: Option) -> None:
        self.state.set_timestamp(option.argument or "")

    def _require_histogram(self, option: Option) -> None:
        explicit = self.state.metric_type
        if explicit and explicit != HISTOGRAM:
            raise TypeConflict(
                f"{option.kind.flag} is only valid for histogram metrics, but type is {explicit!r}",
                option,
            )
        self.state.histogram_seen = True

    def _on_le(self, option: Option) -> None:
        self._require_histogram(option)
        if self.state.pending_bound is not None:
            logger.warning(
                "Replacing unmatched bucket bound",
                previous=self.state.pending_bound,
                bound=option.argument,
            )
        self.state.pending_bound = option.argument

    def _on_count(self, option: Option) -> None:
        self._require_histogram(option)
        if self.state.pending_bound is None:
            raise MissingBound("--count needs a preceding --le", option)
        self.state.buckets.append(Bucket(self.state.pending_bound, option.argument or ""))
        self.state.pending_bound = None

    def _on_total_count(self, option: Option) -> None:
        self._require_histogram(option)
        if self.state.total_count is not None:
            logger.warning(
                "Replacing total count",
                previous=self.state.total_count,
                total_count=option.argument,
            )
            self.state.buckets[self.state.total_index] = Bucket(INF_BOUND, option.argument or "")
        else:
            self.state.total_index = len(self.state.buckets)
            self.state.buckets.append(Bucket(INF_BOUND, option.argument or ""))
        self.state.total_count = option.argument or ""

    def _on_value(self, option: Option) -> None:
        record = self._build_record(option)
        header_needed = self.last_emitted_name != record.name
        lines = format_record(record, header_needed)
        self.result.lines.extend(lines)
        self.result.records += 1
        if header_needed:
            self.result.headers += 1
        self.last_emitted_name = record.name
        self.state.reset_after_emit()

    def _on_end(self, option: Option) -> None:
        self._ended = True

    def _build_record(self, option: Option) -> SeriesRecord:
        state = self.state
        if not state.name:
            raise MissingName("--value needs a metric name set with --name", option)

        labels = list(state.labels.items())
        if self.sort_labels:
            labels.sort()

        metric_type = state.effective_type
        if metric_type != HISTOGRAM:
            return SeriesRecord(
                name=state.name,
                value=option.argument or "",
                metric_type=metric_type,
                comment=state.comment,
                labels=tuple(labels),
                timestamp=state.timestamp,
            )

        if state.total_count is None:
            raise MissingTotalCount(
                f"histogram {state.name!r} needs --total-count before --value", option
            )
        if state.pending_bound is not None:
            logger.warning(
                "Dropping bucket bound without a count",
                metric=state.name,
                bound=state.pending_bound,
            )
        return SeriesRecord(
            name=state.name,
            value=option.argument or "",
            metric_type=metric_type,
            comment=state.comment,
            labels=tuple(labels),
            timestamp=state.timestamp,
            buckets=tuple(state.buckets),
            total_count=state.total_count,
        )


def translate(options: Iterable[Option], sort_labels: bool = False) -> TranslationResult:
    """Run a fresh accumulator over the options and return the buffered lines"""
    return RecordAccumulator(sort_labels=sort_labels).consume(options)
