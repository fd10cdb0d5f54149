"""
Console Glyphs, Rules and Colors of the Training Log.

Every line the learner writes is built from the pieces below: a horizontal
rule framing the run and summary blocks, a handful of status glyphs, and
the ANSI codes ``ColorFormatter`` paints onto console records.
"""

from __future__ import annotations

import logging


class LogStyle:
    """Shared vocabulary of the training log."""

    HEADER_WIDTH = 72

    # Rules: run banner, block frame, row divider
    HEAVY = "━" * HEADER_WIDTH
    DOUBLE = "═" * HEADER_WIDTH
    LIGHT = "─" * HEADER_WIDTH

    ARROW = "»"
    BULLET = "•"
    WARNING = "⚠"
    SUCCESS = "✓"
    FAILURE = "✗"
    INDENT = "  "

    # Console only; the log file stays plain text
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"

    @classmethod
    def log_phase_header(cls, log: logging.Logger, title: str, rule: str | None = None) -> None:
        """Frame ``title`` between two rules, after a blank spacer line."""
        rule = rule or cls.HEAVY
        for line in ("", rule, title.center(cls.HEADER_WIDTH), rule):
            log.info(line)
