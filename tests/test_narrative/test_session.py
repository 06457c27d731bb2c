import pytest
from engine.core.actions import ControlMode
from narrative.components import NarrativeFlags
from narrative.dialogue.conditions import FlagContext
from narrative.dialogue.inventory_gate import InventoryGate
from narrative.dialogue.session import (
    Continuation,
    ConversationSession,
    SessionState,
)
from narrative.dialogue.variables import VariableContext

@pytest.fixture
def flags():
    return NarrativeFlags()

@pytest.fixture
def make_session(make_asset, target, flags, presenter, controls):
    def _make(data, inventory=None, recruiter=None, flag_store=flags, **kwargs):
        return ConversationSession(
            make_asset(data),
            target=target,
            flags=FlagContext(flag_store) if flag_store is not None else None,
            presenter=presenter,
            controls=controls,
            inventory_gate=InventoryGate(inventory),
            variables=VariableContext(target, player_name="Ash"),
            recruiter=recruiter,
            **kwargs,
        )
    return _make

def starts(*entries):
    """Asset whose conditional starts point at lines A, B, C ..."""
    lines = [{"id": name, "text": name, "isTerminal": True} for name in ("Start", "A", "B", "C")]
    return {
        "conditionalStarts": [
            {"lineId": line_id, "requiredFlags": required, "priority": priority}
            for line_id, required, priority in entries
        ],
        "lines": lines,
    }

# Lifecycle

def test_start(make_session, simple_asset_data, target, presenter, controls):
    session = make_session(simple_asset_data)
    assert session.state == SessionState.IDLE

    line = session.start()

    assert session.state == SessionState.ACTIVE
    assert line.line_id == "Start"
    assert line.text == "Hello Ash."
    assert [o.text for o in line.options] == ["Ask", "Leave"]
    assert line.continuation == Continuation.OPTIONS
    assert presenter.shown == [line]
    assert target.paused == 1
    assert controls.mode == ControlMode.IN_CONVERSATION

def test_start_twice_is_ignored(make_session, simple_asset_data, presenter):
    session = make_session(simple_asset_data)
    session.start()
    assert session.start() is None
    assert len(presenter.shown) == 1

def test_end_restores_everything(make_session, simple_asset_data, target, presenter, controls):
    ended = []
    session = make_session(simple_asset_data, on_end=ended.append)
    session.start()

    session.end()

    assert session.state == SessionState.ENDED
    assert session.current_line is None
    assert target.resumed == 1
    assert controls.mode == ControlMode.GAMEPLAY
    assert presenter.closed == 1
    assert ended == [session]

def test_end_is_idempotent(make_session, simple_asset_data, target, presenter, controls):
    ended = []
    session = make_session(simple_asset_data, on_end=ended.append)
    session.start()

    session.end()
    session.end()

    assert target.resumed == 1
    assert controls.history == [ControlMode.IN_CONVERSATION, ControlMode.GAMEPLAY]
    assert presenter.closed == 1
    assert len(ended) == 1

def test_end_before_start_is_noop(make_session, simple_asset_data, target):
    session = make_session(simple_asset_data)
    session.end()

    assert session.state == SessionState.IDLE
    assert target.resumed == 0

def test_operations_after_end(make_session, simple_asset_data, presenter):
    session = make_session(simple_asset_data)
    session.start()
    session.end()

    assert not session.select_option(0)
    assert not session.advance("Ask")
    assert not session.proceed()
    assert len(presenter.shown) == 1

# Starting line

def test_higher_priority_start_wins(make_session, flags):
    flags.set_flag("x")
    for entries in ([("A", ["x"], 5), ("B", ["x"], 10)], [("B", ["x"], 10), ("A", ["x"], 5)]):
        assert make_session(starts(*entries)).start().line_id == "B"

def test_equal_priority_keeps_declaration_order(make_session, flags):
    flags.set_flag("x")
    for _ in range(5):
        session = make_session(starts(("B", ["x"], 3), ("A", ["x"], 3)))
        assert session.start().line_id == "B"

def test_unsatisfied_start_is_skipped(make_session, flags):
    flags.set_flag("x")
    session = make_session(starts(("A", ["missing"], 10), ("B", ["x"], 1)))
    assert session.start().line_id == "B"

def test_start_with_unknown_line_is_skipped(make_session, flags):
    flags.set_flag("x")
    session = make_session(starts(("Nowhere", ["x"], 10), ("C", ["x"], 1)))
    assert session.start().line_id == "C"

def test_starting_line_used_when_no_start_holds(make_session):
    data = starts(("A", ["missing"], 1))
    data["startingLineId"] = "B"
    assert make_session(data).start().line_id == "B"

def test_first_line_used_when_starting_line_unknown(make_session):
    data = {
        "startingLineId": "Missing",
        "lines": [{"id": "First", "isTerminal": True}, {"id": "Second", "isTerminal": True}],
    }
    assert make_session(data).start().line_id == "First"

def test_no_flag_owner_satisfies_every_start(make_session):
    session = make_session(starts(("A", ["anything"], 1)), flag_store=None)
    assert session.start().line_id == "A"

def test_start_applies_line_flags(make_session, flags):
    flags.set_flag("old")
    data = {"lines": [{"id": "Start", "setFlags": ["met_player"], "removeFlags": ["old"], "isTerminal": True}]}

    make_session(data).start()

    assert flags.has_flag("met_player")
    assert not flags.has_flag("old")

# Advancing

def test_advance_to_gated_line_ends(make_session, presenter, target):
    data = {
        "lines": [
            {"id": "Start", "text": "Hi", "options": [{"text": "Join?", "nextLine": "Recruit"}]},
            {"id": "Recruit", "text": "Welcome back", "requiredFlags": ["met_before"]},
        ],
    }
    session = make_session(data)
    session.start()

    assert not session.advance("Recruit")

    assert session.state == SessionState.ENDED
    assert all(line.text != "Welcome back" for line in presenter.shown)
    assert target.resumed == 1

def test_advance_to_blocked_line_ends(make_session, flags):
    flags.set_flag("angry")
    data = {"lines": [{"id": "Start"}, {"id": "Nice", "blockedByFlags": ["angry"]}]}
    session = make_session(data)
    session.start()

    assert not session.advance("Nice")
    assert not session.is_active

@pytest.mark.parametrize("next_line", [None, "", "Missing"])
def test_advance_to_missing_line_ends(make_session, simple_asset_data, next_line):
    session = make_session(simple_asset_data)
    session.start()

    assert not session.advance(next_line)
    assert session.state == SessionState.ENDED

def test_advance_applies_flags_and_substitutes(make_session, flags, presenter):
    data = {
        "lines": [
            {"id": "Start"},
            {"id": "Next", "text": "Bye {playerName}", "setFlags": ["said_bye"], "isTerminal": True},
        ],
    }
    session = make_session(data)
    session.start()

    assert session.advance("Next")

    assert flags.has_flag("said_bye")
    assert presenter.shown[-1].text == "Bye Ash"
    assert session.asset.lines[1].text == "Bye {playerName}"

def test_proceed(make_session, simple_asset_data):
    session = make_session(simple_asset_data)
    session.start()
    session.select_option(0)

    assert session.current_line.continuation == Continuation.CONTINUE
    assert session.proceed()
    assert session.current_line_id == "Done"
    assert session.current_line.continuation == Continuation.CLOSE

    assert not session.proceed()
    assert session.state == SessionState.ENDED

def test_proceed_on_options_does_nothing(make_session, simple_asset_data):
    session = make_session(simple_asset_data)
    session.start()

    assert session.proceed()
    assert session.current_line_id == "Start"

def test_dead_end_line(make_session):
    session = make_session({"lines": [{"id": "Start", "text": "..."}]})
    line = session.start()

    assert line.continuation == Continuation.END
    assert not session.proceed()
    assert not session.is_active

# Options

def test_select_option_advances(make_session, simple_asset_data):
    session = make_session(simple_asset_data)
    session.start()

    assert session.select_option(1)
    assert session.current_line_id == "Leave"

def test_select_resolved_option(make_session, simple_asset_data):
    session = make_session(simple_asset_data)
    line = session.start()

    assert session.select_option(line.options[0])
    assert session.current_line_id == "Ask"

def test_select_invalid_index_keeps_line(make_session, simple_asset_data):
    session = make_session(simple_asset_data)
    session.start()

    assert session.select_option(7)
    assert session.current_line_id == "Start"

def test_select_option_without_next_line_ends(make_session):
    session = make_session({"lines": [{"id": "Start", "options": [{"text": "Bye"}]}]})
    session.start()

    assert not session.select_option(0)
    assert session.state == SessionState.ENDED

def test_select_option_applies_flags(make_session, flags):
    flags.set_flag("stranger")
    data = {
        "lines": [
            {"id": "Start", "options": [
                {"text": "Hi", "nextLine": "End", "setFlags": ["friend"], "removeFlags": ["stranger"]},
            ]},
            {"id": "End", "isTerminal": True},
        ],
    }
    session = make_session(data)
    session.start()
    session.select_option(0)

    assert flags.has_flag("friend")
    assert not flags.has_flag("stranger")

def test_gated_options_hidden(make_session, flags):
    flags.set_flag("angry")
    data = {
        "lines": [{"id": "Start", "options": [
            {"text": "Calm down", "nextLine": "Start", "requiredFlags": ["angry"]},
            {"text": "Hug", "nextLine": "Start", "blockedByFlags": ["angry"]},
            {"text": "Leave"},
        ]}],
    }
    line = make_session(data).start()

    assert [o.text for o in line.options] == ["Calm down", "Leave"]
    assert [o.index for o in line.options] == [0, 1]

def test_option_gate_closing_after_display_ends(make_session, flags):
    data = {
        "lines": [
            {"id": "Start", "options": [{"text": "Secret", "nextLine": "Start", "blockedByFlags": ["told"]}]},
        ],
    }
    session = make_session(data)
    session.start()
    flags.set_flag("told")

    assert not session.select_option(0)
    assert session.state == SessionState.ENDED

def test_wood_is_consumed_on_selection(make_session, fake_inventory):
    inventory = fake_inventory(Wood=3)
    data = {
        "lines": [
            {"id": "Start", "options": [{
                "text": "Here's the wood",
                "nextLine": "Thanks",
                "requiredInventoryItems": [{"itemName": "Wood", "requiredQuantity": 3, "consumeOnUse": True}],
            }]},
            {"id": "Thanks", "isTerminal": True},
        ],
    }
    session = make_session(data, inventory=inventory)
    line = session.start()

    assert line.options[0].available
    assert line.options[0].cost_text == "Requires: 3x Wood"
    assert session.inventory_gate.can_select(line.options[0].option)
    assert inventory.items["Wood"] == 3

    assert session.select_option(0)

    assert inventory.items["Wood"] == 0
    assert inventory.removed == [("Wood", 3)]
    assert session.current_line_id == "Thanks"

def test_unaffordable_option_refused(make_session, fake_inventory, flags):
    inventory = fake_inventory(Wood=1)
    data = {
        "lines": [
            {"id": "Start", "options": [{
                "text": "Trade",
                "nextLine": "Done",
                "setFlags": ["traded"],
                "requiredInventoryItems": [{"itemName": "Wood", "requiredQuantity": 3, "consumeOnUse": True}],
            }]},
            {"id": "Done", "isTerminal": True},
        ],
    }
    session = make_session(data, inventory=inventory)
    line = session.start()
    assert not line.options[0].available

    assert session.select_option(0)

    assert session.current_line_id == "Start"
    assert inventory.removed == []
    assert not flags.has_flag("traded")

def test_flags_without_owner_are_skipped(make_session):
    data = {"lines": [{"id": "Start", "setFlags": ["seen"], "isTerminal": True}]}
    session = make_session(data, flag_store=None)

    assert session.start().line_id == "Start"
    assert session.flags is None

# Recruitment

class RecordingRecruiter:
    def __init__(self, result=True, inventory=None):
        self.result = result
        self.inventory = inventory
        self.calls = []

    def recruit(self, target, npc_name):
        # Snapshot what had already happened when recruitment ran
        wood = self.inventory.items.get("Wood") if self.inventory else None
        self.calls.append((target, npc_name, wood))
        return self.result

def recruit_data(**option):
    return {
        "lines": [
            {"id": "Start", "options": [{"text": "Join us", "nextLine": "Joined", "recruitNPC": "Old Tom", **option}]},
            {"id": "Joined", "text": "{npcName} joins", "isTerminal": True},
        ],
    }

def test_recruitment_sets_flags(make_session, flags, target):
    recruiter = RecordingRecruiter()
    session = make_session(recruit_data(), recruiter=recruiter)
    session.start()
    session.select_option(0)

    assert recruiter.calls == [(target, "Old Tom", None)]
    assert flags.has_flag("recruited")
    assert flags.has_flag("recruited_old_tom")
    assert session.current_line_id == "Joined"

def test_failed_recruitment_sets_flag(make_session, flags):
    session = make_session(recruit_data(), recruiter=RecordingRecruiter(result=False))
    session.start()
    session.select_option(0)

    assert flags.has_flag("recruitment_failed")
    assert not flags.has_flag("recruited")
    assert session.current_line_id == "Joined"

def test_recruitment_without_recruiter_fails(make_session, flags):
    session = make_session(recruit_data())
    session.start()
    session.select_option(0)

    assert flags.has_flag("recruitment_failed")

def test_side_effect_order(make_session, flags, fake_inventory):
    inventory = fake_inventory(Wood=2)
    recruiter = RecordingRecruiter(inventory=inventory)
    seen = []

    class OrderedFlags(NarrativeFlags):
        def set_flag(self, name, value="true"):
            seen.append((name, inventory.items["Wood"], len(recruiter.calls)))
            super().set_flag(name, value)

    data = recruit_data(
        setFlags=["paid"],
        requiredInventoryItems=[{"itemName": "Wood", "requiredQuantity": 2, "consumeOnUse": True}],
    )
    session = make_session(data, inventory=inventory, recruiter=recruiter, flag_store=OrderedFlags())
    session.start()
    session.select_option(0)

    # Consumed before flags, flags before recruitment
    assert seen[0] == ("paid", 0, 0)
    assert recruiter.calls[0][2] == 0
    assert [name for name, _, _ in seen] == ["paid", "recruited", "recruited_old_tom"]
