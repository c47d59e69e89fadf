"""Prometheus exposition line formatter"""
from typing import Iterable, List, Tuple

from .models import SeriesRecord, UNTYPED


def escape_label_value(value: str) -> str:
    """Escape a label value: backslash, then double quote, then newline"""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _label_pairs(labels: Iterable[Tuple[str, str]]) -> str:
    # every pair carries its own trailing comma
    return "".join(f'{name}="{escape_label_value(value)}",' for name, value in labels)


def format_labels(labels: Iterable[Tuple[str, str]]) -> str:
    """Render a label set as {a="x",b="y",}; empty string when there are none"""
    pairs = _label_pairs(labels)
    if not pairs:
        return ""
    return "{" + pairs + "}"


def format_bucket_labels(labels: Iterable[Tuple[str, str]], bound: str) -> str:
    """Render user labels followed by the unescaped le label"""
    return "{" + _label_pairs(labels) + f'le="{bound}"' + "}"


def _suffix(timestamp: str) -> str:
    return f" {timestamp}" if timestamp else ""


def format_header(record: SeriesRecord) -> List[str]:
    """HELP and TYPE lines for the record's metric"""
    return [
        f"# HELP {record.name} {record.comment}",
        f"# TYPE {record.name} {record.metric_type or UNTYPED}",
    ]


def format_record(record: SeriesRecord, header_needed: bool) -> List[str]:
    """Turn one series record into its exposition lines.

    Scalar records produce one sample line. Histogram records produce one
    ``_bucket`` line per bucket in accumulation order, then ``_sum`` and
    ``_count``. The header block is prepended when ``header_needed`` is set.
    """
    lines: List[str] = format_header(record) if header_needed else []
    ts = _suffix(record.timestamp)

    if not record.is_histogram:
        lines.append(f"{record.name}{format_labels(record.labels)} {record.value}{ts}")
        return lines

    for bucket in record.buckets:
        lines.append(
            f"{record.name}_bucket{format_bucket_labels(record.labels, bucket.bound)} {bucket.count}{ts}"
        )
    labels_str = format_labels(record.labels)
    lines.append(f"{record.name}_sum{labels_str} {record.value}{ts}")
    lines.append(f"{record.name}_count{labels_str} {record.total_count}{ts}")
    return lines
