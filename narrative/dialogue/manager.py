"""
Narrative manager - starts and tracks conversations.

Owns the single active ConversationSession. Starting a conversation
while another one is running ends the running one first, so its
target is always resumed and the control mode restored.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from engine.core.events import EventBus, UIEvent
from narrative.components.narrative import CharacterType
from narrative.config import NarrativeConfig
from narrative.dialogue.conditions import FlagContext, FlagSource, FlagStore
from narrative.dialogue.errors import DialogueUnavailable
from narrative.dialogue.inventory_gate import InventoryGate, ItemContainer
from narrative.dialogue.loader import DialogueLoader
from narrative.dialogue.models import DialogueAsset
from narrative.dialogue.selector import DialogueSelector
from narrative.dialogue.session import (
    ControlModeSwitch,
    ConversationSession,
    ConversationTarget,
    DialoguePresenter,
    Recruiter,
)
from narrative.dialogue.variables import VariableContext


logger = logging.getLogger(__name__)


class NarrativeManager:
    """
    Entry point for conversations.

    Usage:
        manager = NarrativeManager(config, event_bus, controls=input_handler,
                                   inventory=player.get(Inventory),
                                   global_flags=progression, recruiter=camp)
        session = manager.start_conversation(target, CharacterType.HUMAN_MALE_1,
                                             flag_store=npc.get(NarrativeFlags))
    """

    def __init__(
        self,
        config: Optional[NarrativeConfig] = None,
        event_bus: Optional[EventBus] = None,
        loader: Optional[DialogueLoader] = None,
        selector: Optional[DialogueSelector] = None,
        presenter: Optional[DialoguePresenter] = None,
        controls: Optional[ControlModeSwitch] = None,
        inventory: Optional[ItemContainer] = None,
        global_flags: Optional[FlagSource] = None,
        recruiter: Optional[Recruiter] = None,
        total_npcs: Optional[Callable[[], int]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or NarrativeConfig()
        self.event_bus = event_bus or EventBus()
        self.loader = loader or DialogueLoader(self.config.dialogue_path)
        self.selector = selector or DialogueSelector(
            self.loader,
            mappings=self.config.character_dialogue_mappings,
            fallback_asset=self.config.fallback_asset,
            rng=rng,
        )
        self.presenter = presenter
        self.controls = controls
        self.inventory_gate = InventoryGate(inventory)
        self.global_flags = global_flags
        self.recruiter = recruiter
        self.total_npcs = total_npcs

        self._session: Optional[ConversationSession] = None

    @property
    def session(self) -> Optional[ConversationSession]:
        """The running conversation, if any."""
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None and self._session.is_active

    def _flag_context(self, flag_store: Optional[FlagStore]) -> Optional[FlagContext]:
        if flag_store is None:
            return None
        return FlagContext(flag_store, self.global_flags, trace=self.config.debug_logging)

    def start_conversation(
        self,
        target: Optional[ConversationTarget],
        character_type: CharacterType,
        flag_store: Optional[FlagStore] = None,
    ) -> ConversationSession:
        """
        Start a conversation with dialogue chosen for a character category.

        Args:
            target: NPC being talked to
            character_type: Category used to select dialogue
            flag_store: The NPC's flags, or None for dialogue without an owner

        Returns:
            The running session

        Raises:
            DialogueUnavailable: If no dialogue exists for the category
        """
        flags = self._flag_context(flag_store)
        asset = self.selector.select(character_type, flags.has if flags else None)
        return self._begin(asset, target, flags)

    def start_conversation_with_asset(
        self,
        asset_id: str,
        target: Optional[ConversationTarget],
        flag_store: Optional[FlagStore] = None,
    ) -> ConversationSession:
        """
        Start a conversation with a specific dialogue asset.

        Raises:
            DialogueUnavailable: If the asset is missing or malformed
        """
        asset = self.loader.load_asset(asset_id)
        if asset is None:
            raise DialogueUnavailable(f"Dialogue asset '{asset_id}' is not available")
        return self._begin(asset, target, self._flag_context(flag_store))

    def _begin(
        self,
        asset: DialogueAsset,
        target: Optional[ConversationTarget],
        flags: Optional[FlagContext],
    ) -> ConversationSession:
        if self._session is not None:
            logger.warning(
                f"Starting {asset.asset_id} while {self._session.asset.asset_id} "
                f"is active, ending it first"
            )
            self._session.end()

        session = ConversationSession(
            asset,
            target=target,
            flags=flags,
            presenter=self.presenter,
            controls=self.controls,
            inventory_gate=self.inventory_gate,
            variables=VariableContext(
                target=target,
                player_name=self.config.player_name,
                camp_name=self.config.camp_name,
                total_npcs=self.total_npcs,
            ),
            recruiter=self.recruiter,
            on_end=self._on_session_end,
        )
        self._session = session

        session.start()
        self.event_bus.publish(
            UIEvent.DIALOG_STARTED,
            session=session,
            asset_id=asset.asset_id,
            target=target,
        )
        return session

    def end_conversation(self) -> None:
        """End the running conversation, if any."""
        if self._session is not None:
            self._session.end()

    def _on_session_end(self, session: ConversationSession) -> None:
        if self._session is session:
            self._session = None

        self.event_bus.publish(
            UIEvent.DIALOG_ENDED,
            session=session,
            asset_id=session.asset.asset_id,
            target=session.target,
        )
