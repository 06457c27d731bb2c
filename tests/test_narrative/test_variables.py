import re
import pytest
from narrative.dialogue.models import DialogueLine
from narrative.dialogue.variables import (
    PLACEHOLDERS,
    VariableContext,
    npc_display_name,
    resolve_line,
    substitute_variables,
)

def test_all_placeholders_replaced(make_target):
    target = make_target(settler="Mara", age=34, description="A medic.", job="Working")
    context = VariableContext(target, player_name="Ash", camp_name="Haven", total_npcs=lambda: 5)

    text = "{npcName} ({npcAge}) {npcDescription} {npcJob} - {playerName} @ {campName}: {totalNPCs} {npcName}"
    assert substitute_variables(text, context) == (
        "Mara (34) A medic. Working - Ash @ Haven: 5 Mara"
    )

def test_missing_context_uses_fallbacks():
    text = " ".join("{" + key + "}" for key in reversed(PLACEHOLDERS))
    result = substitute_variables(text, VariableContext())

    for key in PLACEHOLDERS:
        assert "{" + key + "}" not in result
    assert result == "0 Camp Player Unknown Unknown Unknown Unknown NPC"

def test_unknown_placeholders_left_alone():
    assert substitute_variables("{weather} today", VariableContext()) == "{weather} today"

def test_only_requested_values_are_computed(make_target):
    calls = []
    def count():
        calls.append(1)
        return 3

    context = VariableContext(make_target(), total_npcs=count)
    substitute_variables("Hello {playerName}", context)
    assert calls == []

    substitute_variables("{totalNPCs} settlers", context)
    assert calls == [1]

@pytest.mark.parametrize("name, settler, expected", [
    ("Settler_Mara", None, "Mara"),
    ("Settler_", None, "Unknown NPC"),
    ("Trader", None, "Trader"),
    ("Settler_Mara", "Mara Voss", "Mara Voss"),
    ("", None, "Unknown NPC"),
])
def test_npc_display_name(make_target, name, settler, expected):
    assert npc_display_name(make_target(name=name, settler=settler)) == expected

def test_resolve_line_copies(make_target):
    line = DialogueLine.model_validate({
        "id": "Start",
        "text": "Hi {playerName}",
        "options": [{"text": "I'm {playerName}", "nextLine": "Next"}],
    })

    display = resolve_line(line, VariableContext(make_target(), player_name="Ash"))

    assert display.text == "Hi Ash"
    assert display.options[0].text == "I'm Ash"
    assert display.options[0].next_line == "Next"
    assert line.text == "Hi {playerName}"
    assert line.options[0].text == "I'm {playerName}"
