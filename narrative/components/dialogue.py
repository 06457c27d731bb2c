"""
Dialogue components - what the conversation UI currently shows.
"""

from __future__ import annotations

from typing import Optional

from engine.core.component import Component
from narrative.dialogue.session import Continuation, ResolvedLine, ResolvedOption


class DialogueView(Component):
    """
    Presentation state of the conversation box.

    Attributes:
        line: Line on display (None when closed)
        selected_index: Highlighted option
        is_open: Whether the box is visible
        lines_shown: Lines displayed since the box opened
    """
    line: Optional[ResolvedLine] = None
    selected_index: int = 0
    is_open: bool = False
    lines_shown: int = 0

    @property
    def options(self) -> tuple[ResolvedOption, ...]:
        return self.line.options if self.line else ()

    @property
    def selected_option(self) -> Optional[ResolvedOption]:
        options = self.options
        if 0 <= self.selected_index < len(options):
            return options[self.selected_index]
        return None

    @property
    def prompt(self) -> str:
        """Label of the acknowledge button for lines without options."""
        if self.line is None:
            return ""
        if self.line.continuation == Continuation.CONTINUE:
            return "Continue"
        if self.line.continuation in (Continuation.CLOSE, Continuation.END):
            return "Close"
        return ""

    def show(self, line: ResolvedLine) -> None:
        self.line = line
        self.is_open = True
        self.lines_shown += 1
        # Highlight the first option the player can afford
        self.selected_index = next(
            (o.index for o in line.options if o.available), 0
        )

    def hide(self) -> None:
        self.line = None
        self.is_open = False
        self.selected_index = 0
        self.lines_shown = 0

    def select_next(self) -> None:
        if self.options:
            self.selected_index = (self.selected_index + 1) % len(self.options)

    def select_prev(self) -> None:
        if self.options:
            self.selected_index = (self.selected_index - 1) % len(self.options)
