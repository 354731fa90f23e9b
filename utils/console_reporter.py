"""
Console rendering of classification events and run summaries
"""

import sys
from typing import Optional, TextIO

from tqdm import tqdm

from core.coordinator import ClassificationEvent, DedupSummary
from core.similarity import Classification
from utils.file_utils import format_file_size

RED = "\x1b[91m"
YELLOW = "\x1b[93m"
CYAN = "\x1b[96m"
GREY = "\x1b[90m"
RESET = "\x1b[m"

PROGRESS_STYLES = ("lines", "bar")


class ConsoleReporter:
    """
    Render ClassificationEvents to a text stream

    ``lines`` prints one progress line per image; lines for unique images
    end with a carriage return on terminals so the next line overwrites
    them. ``bar`` shows a tqdm progress bar and only prints matches.
    """

    def __init__(self,
                 stream: TextIO = None,
                 color: bool = True,
                 progress_style: str = "lines"):
        if progress_style not in PROGRESS_STYLES:
            raise ValueError(f"Unknown progress style: {progress_style}")

        self.stream = stream or sys.stdout
        self.interactive = hasattr(self.stream, 'isatty') and self.stream.isatty()
        self.color = color and self.interactive
        self.progress_style = progress_style
        self._bar: Optional[tqdm] = None

    def _paint(self, text: str, code: str) -> str:
        if not self.color:
            return text
        return f"{code}{text}{RESET}"

    def format_match(self, event: ClassificationEvent) -> str:
        if event.classification is Classification.DUPLICATE:
            return f"{self._paint('dup', RED)} {event.path} == {event.matched_path}"
        if event.classification is Classification.SIMILAR:
            return f"{self._paint('sim', YELLOW)} {event.path} ~= {event.matched_path}"
        return ""

    def format_event(self, event: ClassificationEvent) -> str:
        line = f"{event.index}/{event.total} {self._paint(event.hash_hex, GREY)}"
        match = self.format_match(event)
        if match:
            line += f" {match}"
        return line

    def format_summary(self, summary: DedupSummary) -> str:
        # Trailing spaces clear leftovers of an overwritten progress line
        line = (
            f"{summary.duplicate} {self._paint('dup', RED)}, "
            f"{summary.similar} {self._paint('sim', YELLOW)}, "
            f"{summary.unique} {self._paint('uniq', CYAN)}        "
        )
        if summary.deleted:
            line += (
                f"\nDeleted {len(summary.deleted)} files, "
                f"reclaimed {format_file_size(summary.space_reclaimed)}"
            )
        return line

    def on_event(self, event: ClassificationEvent):
        if self.progress_style == "bar":
            self._on_event_bar(event)
        else:
            self._on_event_lines(event)

    def _on_event_lines(self, event: ClassificationEvent):
        is_match = event.classification is not Classification.UNIQUE
        ending = "\r" if self.interactive and not is_match else "\n"
        self.stream.write(self.format_event(event) + ending)

        if event.discarded_path:
            self.stream.write(f"  {self._paint('del', RED)} {event.discarded_path}\n")
        self.stream.flush()

    def _on_event_bar(self, event: ClassificationEvent):
        if self._bar is None:
            self._bar = tqdm(total=event.total, desc="Classifying images",
                             unit="img", file=self.stream)

        if event.classification is not Classification.UNIQUE:
            tqdm.write(self.format_match(event), file=self.stream)
        if event.discarded_path:
            tqdm.write(f"  {self._paint('del', RED)} {event.discarded_path}", file=self.stream)
        self._bar.update(1)

    def print_summary(self, summary: DedupSummary):
        self.close()
        self.stream.write(self.format_summary(summary) + "\n")
        self.stream.flush()

    def close(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None
