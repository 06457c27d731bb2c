"""
Conversation session - one run of a dialogue asset against one target.

States:
    IDLE -> STARTING -> ACTIVE -> ENDED

The session walks the dialogue graph. Entering a line applies its flag
side effects and hands a resolved, display-ready copy to the
presenter. Selecting an option pays its inventory costs, applies its
flags, triggers recruitment and then advances. Any missing line or
closed gate ends the conversation instead of raising.

Usage:
    session = ConversationSession(asset, target, flags=flag_context,
                                  presenter=ui, controls=input_handler)
    session.start()
    session.select_option(0)
    session.end()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol, Union

from engine.core.actions import ControlMode
from narrative.dialogue.conditions import FlagContext, check_conditions
from narrative.dialogue.inventory_gate import InventoryGate
from narrative.dialogue.models import DialogueAsset, DialogueLine, DialogueOption
from narrative.dialogue.variables import VariableContext, npc_display_name, resolve_line


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a conversation session."""
    IDLE = auto()
    STARTING = auto()
    ACTIVE = auto()
    ENDED = auto()


class Continuation(Enum):
    """What confirming a displayed line does."""
    OPTIONS = auto()   # Player picks one of the options
    CONTINUE = auto()  # Advance to the line's next_line
    CLOSE = auto()     # Terminal line, close the conversation
    END = auto()       # Dead end, close the conversation


class ConversationTarget(Protocol):
    """The NPC side of a conversation."""

    @property
    def name(self) -> str: ...

    def pause_for_conversation(self) -> None: ...

    def resume_after_conversation(self) -> None: ...

    def settler_name(self) -> Optional[str]: ...

    def age(self) -> Optional[int]: ...

    def description(self) -> Optional[str]: ...

    def current_job(self) -> Optional[str]: ...


class DialoguePresenter(Protocol):
    """Shows resolved lines to the player."""

    def display(self, line: ResolvedLine) -> None: ...

    def close(self) -> None: ...


class ControlModeSwitch(Protocol):
    """Switches what the player's input drives."""

    def set_control_mode(self, mode: ControlMode) -> ControlMode: ...


class Recruiter(Protocol):
    """Performs the recruitment side effect of an option."""

    def recruit(self, target: ConversationTarget, npc_name: str) -> bool: ...


@dataclass(frozen=True)
class ResolvedOption:
    """
    An option as shown to the player.

    Attributes:
        index: Position among the shown options
        text: Substituted option text
        option: Substituted copy of the source option
        available: Whether the inventory can pay for it
        cost_text: "Requires: ..." hint, empty when free
    """
    index: int
    text: str
    option: DialogueOption
    available: bool = True
    cost_text: str = ""


@dataclass(frozen=True)
class ResolvedLine:
    """
    A line ready for display.

    Options whose flag gate is closed are not included.
    """
    line_id: str
    speaker: str
    text: str
    options: tuple[ResolvedOption, ...]
    continuation: Continuation
    next_line: Optional[str] = None

    @property
    def has_options(self) -> bool:
        return bool(self.options)


def resolve_starting_line(
    asset: DialogueAsset,
    index: dict[str, DialogueLine],
    flags: Optional[FlagContext],
) -> DialogueLine:
    """
    Pick the line a conversation opens with.

    Satisfied conditional starts are tried by descending priority
    (declaration order breaks ties). Starts naming an unknown line are
    skipped. Without a usable conditional start the asset's starting
    line is used, or its first line if that id is unknown.
    """
    satisfied = [
        start for start in asset.conditional_starts
        if check_conditions(start.required_flags, start.blocked_by_flags, flags)
    ]
    # sorted() is stable, so equal priorities keep declaration order
    for start in sorted(satisfied, key=lambda s: -s.priority):
        line = index.get(start.line_id)
        if line is not None:
            logger.debug(f"Using conditional start '{start.line_id}' (priority {start.priority})")
            return line
        logger.error(f"Conditional start references unknown line '{start.line_id}' in {asset.asset_id}")

    line = index.get(asset.starting_line_id)
    if line is not None:
        return line

    logger.debug(
        f"Starting line '{asset.starting_line_id}' not found in {asset.asset_id}, "
        f"using first line"
    )
    return asset.first_line


class ConversationSession:
    """
    A single conversation.

    A session is used once: after ``end`` every operation is a no-op.
    """

    def __init__(
        self,
        asset: DialogueAsset,
        target: Optional[ConversationTarget] = None,
        flags: Optional[FlagContext] = None,
        presenter: Optional[DialoguePresenter] = None,
        controls: Optional[ControlModeSwitch] = None,
        inventory_gate: Optional[InventoryGate] = None,
        variables: Optional[VariableContext] = None,
        recruiter: Optional[Recruiter] = None,
        conversation_mode: ControlMode = ControlMode.IN_CONVERSATION,
        on_end: Optional[Callable[[ConversationSession], None]] = None,
    ):
        self.asset = asset
        self.target = target
        self.flags = flags
        self.presenter = presenter
        self.controls = controls
        self.inventory_gate = inventory_gate or InventoryGate()
        self.variables = variables or VariableContext(target=target)
        self.recruiter = recruiter
        self.conversation_mode = conversation_mode
        self.on_end = on_end

        self._state = SessionState.IDLE
        self._index: dict[str, DialogueLine] = {}
        self._current: Optional[ResolvedLine] = None
        self._target_paused = False
        self._previous_mode: Optional[ControlMode] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == SessionState.ACTIVE

    @property
    def current_line(self) -> Optional[ResolvedLine]:
        """The line on display, or None when not active."""
        return self._current

    @property
    def current_line_id(self) -> Optional[str]:
        return self._current.line_id if self._current else None

    # Lifecycle

    def start(self) -> Optional[ResolvedLine]:
        """
        Open the conversation on its starting line.

        Returns:
            The first displayed line (None if the session was not idle)
        """
        if self._state != SessionState.IDLE:
            logger.warning(f"Session for {self.asset.asset_id} already started")
            return None

        self._state = SessionState.STARTING
        self._index = self.asset.build_line_index()

        line = resolve_starting_line(self.asset, self._index, self.flags)
        self._apply_flags(line.set_flags, line.remove_flags)
        resolved = self._resolve(line)

        if self.target is not None:
            self.target.pause_for_conversation()
            self._target_paused = True

        if self.controls is not None:
            self._previous_mode = self.controls.set_control_mode(self.conversation_mode)

        self._state = SessionState.ACTIVE
        logger.info(f"Conversation started: {self.asset.asset_id} at '{line.id}'")
        self._show(resolved)
        return resolved

    def end(self) -> None:
        """
        Close the conversation.

        Resumes the target, restores the previous control mode and hides
        the presentation. Safe to call repeatedly.
        """
        if self._state in (SessionState.IDLE, SessionState.ENDED):
            return

        self._state = SessionState.ENDED
        self._current = None
        self._index = {}

        if self._target_paused and self.target is not None:
            self._target_paused = False
            self.target.resume_after_conversation()

        if self._previous_mode is not None and self.controls is not None:
            mode, self._previous_mode = self._previous_mode, None
            self.controls.set_control_mode(mode)

        if self.presenter is not None:
            self.presenter.close()

        logger.info(f"Conversation ended: {self.asset.asset_id}")

        if self.on_end is not None:
            self.on_end(self)

    # Navigation

    def select_option(self, choice: Union[int, ResolvedOption]) -> bool:
        """
        Choose one of the options on display.

        Costs are paid, then the option's flags are applied, then
        recruitment runs, then the conversation advances. An option the
        inventory cannot pay for is refused and the line stays up.

        Args:
            choice: Index into the displayed options, or the option itself

        Returns:
            True if the conversation is still active afterwards
        """
        if not self.is_active or self._current is None:
            return False

        resolved = self._find_option(choice)
        if resolved is None:
            logger.warning(f"Option {choice!r} is not on line '{self._current.line_id}'")
            return True

        option = resolved.option
        if not check_conditions(option.required_flags, option.blocked_by_flags, self.flags):
            logger.info(f"Option '{option.text}' is gated off, ending conversation")
            self.end()
            return False

        if not self.inventory_gate.can_select(option):
            logger.info(f"Option '{option.text}' refused: {resolved.cost_text or 'requirements not met'}")
            return True

        self.inventory_gate.consume(option)
        self._apply_flags(option.set_flags, option.remove_flags)
        if option.recruit_npc:
            self._recruit(option.recruit_npc)

        return self.advance(option.next_line)

    def advance(self, next_line_id: Optional[str]) -> bool:
        """
        Move to another line.

        Args:
            next_line_id: Target line id

        Returns:
            True if the line is now displayed, False if the conversation ended
        """
        if not self.is_active:
            return False

        line = self._index.get(next_line_id) if next_line_id else None
        if line is None:
            if next_line_id:
                logger.warning(f"Line '{next_line_id}' not found in {self.asset.asset_id}")
            self.end()
            return False

        if not check_conditions(line.required_flags, line.blocked_by_flags, self.flags):
            logger.info(f"Line '{line.id}' is gated off, ending conversation")
            self.end()
            return False

        self._apply_flags(line.set_flags, line.remove_flags)
        self._show(self._resolve(line))
        return True

    def proceed(self) -> bool:
        """
        Acknowledge a line without options.

        Continues to the line's next line, or closes the conversation for
        terminal and dead-end lines.

        Returns:
            True if the conversation is still active afterwards
        """
        if not self.is_active or self._current is None:
            return False

        if self._current.continuation == Continuation.OPTIONS:
            return True
        if self._current.continuation == Continuation.CONTINUE:
            return self.advance(self._current.next_line)

        self.end()
        return False

    # Internals

    def _find_option(self, choice: Union[int, ResolvedOption]) -> Optional[ResolvedOption]:
        options = self._current.options if self._current else ()
        if isinstance(choice, ResolvedOption):
            return choice if choice in options else None
        if 0 <= choice < len(options):
            return options[choice]
        return None

    def _apply_flags(self, set_flags, remove_flags) -> None:
        if not set_flags and not remove_flags:
            return
        if self.flags is None:
            logger.warning("Cannot process flags - conversation has no flag owner")
            return
        self.flags.apply(set_flags, remove_flags)

    def _recruit(self, npc_name: str) -> None:
        if not npc_name.strip():
            logger.warning("Cannot recruit NPC with empty name")
            return

        recruited = False
        if self.recruiter is not None and self.target is not None:
            recruited = self.recruiter.recruit(self.target, npc_name)

        if recruited:
            self._set_flag("recruited")
            self._set_flag(f"recruited_{npc_name.replace(' ', '_').lower()}")
            logger.info(f"Recruited NPC: {npc_name}")
        else:
            self._set_flag("recruitment_failed")
            logger.error(f"Failed to recruit NPC '{npc_name}'")

    def _set_flag(self, name: str) -> None:
        if self.flags is None:
            logger.warning(f"Cannot set flag '{name}' - conversation has no flag owner")
            return
        self.flags.set(name)

    def _resolve(self, line: DialogueLine) -> ResolvedLine:
        display = resolve_line(line, self.variables)

        options = []
        for option in display.options:
            if not check_conditions(option.required_flags, option.blocked_by_flags, self.flags):
                continue
            options.append(ResolvedOption(
                index=len(options),
                text=option.text,
                option=option,
                available=self.inventory_gate.can_select(option),
                cost_text=self.inventory_gate.describe(option),
            ))

        if options:
            continuation = Continuation.OPTIONS
        elif line.is_terminal:
            continuation = Continuation.CLOSE
        elif line.next_line:
            continuation = Continuation.CONTINUE
        else:
            continuation = Continuation.END

        return ResolvedLine(
            line_id=line.id,
            speaker=display.speaker or npc_display_name(self.target),
            text=display.text,
            options=tuple(options),
            continuation=continuation,
            next_line=line.next_line,
        )

    def _show(self, resolved: ResolvedLine) -> None:
        self._current = resolved
        if self.presenter is not None:
            self.presenter.display(resolved)

    def __repr__(self) -> str:
        return (
            f"ConversationSession({self.asset.asset_id}, state={self._state.name}, "
            f"line={self.current_line_id})"
        )
