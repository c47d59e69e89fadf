"""Output writers for rendered exposition text"""
import abc
import sys
from pathlib import Path
from typing import Optional, TextIO

from logging_config import get_logger
from .errors import OutputError


logger = get_logger(__name__)


class BaseWriter(abc.ABC):
    """Abstract destination for the complete exposition text"""

    @abc.abstractmethod
    def write(self, content: str) -> None:
        """Write the whole rendered text in one go"""
        pass


class StreamWriter(BaseWriter):
    """Writes to a text stream, stdout by default"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def write(self, content: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(content)
        stream.flush()


class TextfileWriter(BaseWriter):
    """Writes to a file atomically, so textfile collectors never read a partial file"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def write(self, content: str) -> None:
        temp_file = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_file.write_text(content, encoding="utf-8")
            temp_file.replace(self.path)
        except OSError as e:
            logger.error("Failed to write metrics file", path=str(self.path), error=str(e))
            if temp_file.exists():
                temp_file.unlink()
            raise OutputError(f"cannot write {self.path}: {e}") from e

        logger.debug("Wrote metrics file", path=str(self.path), size=len(content))


def create_writer(output_file: Optional[Path] = None) -> BaseWriter:
    """Pick the writer for the configured destination"""
    if output_file:
        return TextfileWriter(output_file)
    return StreamWriter()
