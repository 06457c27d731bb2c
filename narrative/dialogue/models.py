"""
Dialogue asset models.

Immutable Pydantic models for the on-disk dialogue graph. Field names
follow the fixed camelCase JSON format (``nextLine``, ``isTerminal``,
``requiredInventoryItems`` ...) through aliases, while Python code uses
snake_case attributes.

Assets are frozen once loaded. Sessions reference them and never
mutate them; display copies are made with ``model_copy``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


DEFAULT_STARTING_LINE = "Start"


class DialogueModel(BaseModel):
    """Shared configuration for dialogue asset models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra='ignore',
    )


class FlagGated(DialogueModel):
    """Required/blocked flag gate plus the flag side effects of entering."""

    required_flags: tuple[str, ...] = ()
    blocked_by_flags: tuple[str, ...] = ()
    set_flags: tuple[str, ...] = ()
    remove_flags: tuple[str, ...] = ()

    @field_validator(
        'required_flags', 'blocked_by_flags', 'set_flags', 'remove_flags',
        mode='before',
    )
    @classmethod
    def _none_as_empty(cls, value):
        return () if value is None else value


class InventoryRequirement(DialogueModel):
    """
    An item cost attached to a dialogue option.

    Attributes:
        item_name: Inventory item name
        required_quantity: Units that must be held (at least 1)
        consume_on_use: Remove the units when the option is selected
        display_text: Optional hint shown instead of "{qty}x {item}"
    """
    item_name: str = ""
    required_quantity: int = Field(default=1, ge=1)
    consume_on_use: bool = False
    display_text: str = ""


class DialogueOption(FlagGated):
    """A player choice on a dialogue line."""

    text: str = ""
    next_line: str | None = None
    required_item: str | None = None
    recruit_npc: str | None = Field(default=None, alias="recruitNPC")
    required_inventory_items: tuple[InventoryRequirement, ...] = ()

    @field_validator('next_line', 'required_item', 'recruit_npc', mode='before')
    @classmethod
    def _blank_as_none(cls, value):
        return value or None

    @field_validator('required_inventory_items', mode='before')
    @classmethod
    def _items_none_as_empty(cls, value):
        return () if value is None else value

    @property
    def has_inventory_cost(self) -> bool:
        """True when the option needs items to be selectable."""
        return bool(self.required_item) or any(
            req.item_name for req in self.required_inventory_items
        )


class DialogueLine(FlagGated):
    """
    One node of the dialogue graph.

    A line with options shows them; a line without options continues
    to ``next_line`` if set, closes if terminal, and otherwise ends
    the conversation once acknowledged.
    """

    id: str = Field(min_length=1)
    speaker: str = ""
    text: str = ""
    options: tuple[DialogueOption, ...] = ()
    is_terminal: bool = False
    next_line: str | None = None

    @field_validator('next_line', mode='before')
    @classmethod
    def _blank_as_none(cls, value):
        return value or None

    @field_validator('options', mode='before')
    @classmethod
    def _options_none_as_empty(cls, value):
        return () if value is None else value


class ConditionalStart(DialogueModel):
    """
    An alternate entry point, used instead of the starting line while
    its flag condition holds. Higher priority wins.
    """

    line_id: str
    required_flags: tuple[str, ...] = ()
    blocked_by_flags: tuple[str, ...] = ()
    priority: int = 0
    description: str = ""

    @field_validator('required_flags', 'blocked_by_flags', mode='before')
    @classmethod
    def _none_as_empty(cls, value):
        return () if value is None else value


class DialogueAsset(DialogueModel):
    """
    A complete dialogue graph for one conversation.

    Attributes:
        asset_id: Identifier the asset was loaded under (file stem)
        npc_name: Optional speaker name from the source file
        lines: Lines in declared order; ids are unique
        starting_line_id: Default entry line ("Start" when unset)
        conditional_starts: Priority-ranked alternate entry points
    """

    asset_id: str = ""
    npc_name: str = ""
    lines: tuple[DialogueLine, ...]
    starting_line_id: str = DEFAULT_STARTING_LINE
    conditional_starts: tuple[ConditionalStart, ...] = ()

    @field_validator('starting_line_id', mode='before')
    @classmethod
    def _default_start(cls, value):
        return value or DEFAULT_STARTING_LINE

    @field_validator('conditional_starts', mode='before')
    @classmethod
    def _starts_none_as_empty(cls, value):
        return () if value is None else value

    @model_validator(mode='after')
    def _check_lines(self) -> DialogueAsset:
        if not self.lines:
            raise ValueError("dialogue asset has no lines")

        seen: set[str] = set()
        duplicates = []
        for line in self.lines:
            if line.id in seen:
                duplicates.append(line.id)
            seen.add(line.id)
        if duplicates:
            raise ValueError(f"duplicate line ids: {', '.join(sorted(set(duplicates)))}")
        return self

    def build_line_index(self) -> dict[str, DialogueLine]:
        """Map line id to line."""
        return {line.id: line for line in self.lines}

    @property
    def first_line(self) -> DialogueLine:
        return self.lines[0]
