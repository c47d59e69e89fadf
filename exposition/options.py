"""Command-line option stream.

Every sample flag is recorded, in command-line order, as an ``Option`` on a
single list so the accumulator sees the exact interleaving of flags.
"""
import argparse
from typing import List, Optional, Sequence, Tuple

from .errors import UnexpectedArgument
from .models import Option, OptionKind


USAGE_EPILOG = """\
Options are processed left to right. Each --value writes one sample using
the name, type, comment, labels and timestamp given before it. --name,
--type and --comment reset labels and timestamp; --label resets the
timestamp, so give --timestamp last.

Examples:
    # Gauge with labels
    metrics-textfile --name queue_depth --type gauge --comment "Jobs queued" \\
        --label queue=default --value 12

    # Histogram
    metrics-textfile --name http_request_duration_seconds \\
        --le 0.05 --count 24054 --le 0.5 --count 129389 \\
        --total-count 144320 --value 53423
"""

SAMPLE_FLAGS: Tuple[Tuple[OptionKind, str, str], ...] = (
    (OptionKind.NAME, "NAME", "metric name"),
    (OptionKind.TYPE, "TYPE", "metric type (counter, gauge, histogram, ...)"),
    (OptionKind.COMMENT, "TEXT", "HELP text for the metric"),
    (OptionKind.LABEL, "NAME=VALUE", "add or overwrite a label"),
    (OptionKind.TIMESTAMP, "MS", "sample timestamp, written verbatim"),
    (OptionKind.LE, "BOUND", "upper bound of the next histogram bucket"),
    (OptionKind.COUNT, "N", "cumulative count for the preceding --le"),
    (OptionKind.TOTAL_COUNT, "N", "total observation count (the +Inf bucket)"),
    (OptionKind.VALUE, "VALUE", "sample value (histogram sum); writes the sample"),
)


class UsageError(UnexpectedArgument):
    """argparse rejected the command line"""


class _RecordOption(argparse.Action):
    """Append (kind, argument) to the shared ordered option list"""

    def __init__(self, option_strings, dest, kind: OptionKind, **kwargs):
        self.kind = kind
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        stream = getattr(namespace, self.dest, None)
        if stream is None:
            stream = []
            setattr(namespace, self.dest, stream)
        stream.append(Option(self.kind, values))


class OptionParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2"""

    def error(self, message):
        raise UsageError(message)


def build_parser(prog: Optional[str] = None) -> OptionParser:
    parser = OptionParser(
        prog=prog,
        description="Write metrics in the Prometheus text exposition format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EPILOG,
        allow_abbrev=False,
    )
    for kind, metavar, help_text in SAMPLE_FLAGS:
        parser.add_argument(
            kind.flag,
            action=_RecordOption,
            kind=kind,
            dest="options",
            metavar=metavar,
            help=help_text,
        )
    parser.add_argument(
        "--output",
        "-o",
        metavar="PATH",
        default=None,
        help="write atomically to PATH instead of stdout",
    )
    parser.set_defaults(options=None)
    return parser


_JOINED_FLAGS = frozenset(kind.flag for kind, _, _ in SAMPLE_FLAGS)


def join_flag_arguments(argv: Sequence[str]) -> List[str]:
    """Rewrite "--value -Inf" as "--value=-Inf".

    Sample arguments are opaque and may start with a dash; argparse only
    takes such a token as an argument when it is attached with "=".
    Tokens after a bare "--" are left alone.
    """
    tokens = list(argv)
    joined: List[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "--":
            joined.extend(tokens[i:])
            break
        if token in _JOINED_FLAGS and i + 1 < len(tokens):
            joined.append(f"{token}={tokens[i + 1]}")
            i += 2
            continue
        joined.append(token)
        i += 1
    return joined


def parse_options(argv: Sequence[str], prog: Optional[str] = None) -> Tuple[List[Option], argparse.Namespace]:
    """Parse argv into the ordered option stream.

    The stream ends with an END option; leftover tokens follow it as
    ARGUMENT options so the accumulator can reject them.
    """
    parser = build_parser(prog)
    args, extras = parser.parse_known_args(join_flag_arguments(argv))
    stream: List[Option] = list(args.options or [])
    stream.append(Option(OptionKind.END))
    stream.extend(Option(OptionKind.ARGUMENT, token) for token in extras)
    return stream, args
