import pytest
from engine.core.system import System
from engine.core.entity import Entity
from narrative.components import DialogueView, NarrativeFlags

class ViewCounter(System):
    """Counts frames each open dialogue view has been processed."""
    required_components = [DialogueView]

    def __init__(self, log=None):
        super().__init__()
        self.frames = {}
        self.log = log

    def process_entity(self, entity, dt):
        if self.log is not None:
            self.log.append(type(self).__name__)
        if entity.get(DialogueView).is_open:
            self.frames[entity.name] = self.frames.get(entity.name, 0) + 1

class FlagSweeper(System):
    """Drops a one-frame flag from every flag owner."""
    required_components = [NarrativeFlags]
    priority = 10

    def __init__(self, log=None):
        super().__init__()
        self.log = log

    def process_entity(self, entity, dt):
        if self.log is not None:
            self.log.append(type(self).__name__)
        entity.get(NarrativeFlags).remove_flag("just_spoke")

def open_view(name):
    entity = Entity(name)
    view = DialogueView()
    view.is_open = True
    entity.add(view)
    return entity

def test_system_processing(world):
    box = world.add_entity(open_view("DialogueUI"))

    # Entity without a view is never matched
    bystander = Entity("Bystander")
    bystander.add(NarrativeFlags())
    world.add_entity(bystander)

    system = ViewCounter()
    world.add_system(system)

    world.update(1.0)
    world.update(1.0)

    assert system.frames == {"DialogueUI": 2}
    assert box.get(DialogueView).is_open

def test_inactive_entities_skipped(world):
    box = world.add_entity(open_view("DialogueUI"))
    box.active = False

    system = ViewCounter()
    world.add_system(system)
    world.update(1.0)

    assert system.frames == {}

def test_disabled_system_skipped(world):
    world.add_entity(open_view("DialogueUI"))

    system = ViewCounter()
    system.enabled = False
    world.add_system(system)
    world.update(1.0)

    assert system.frames == {}

def test_priority_order(world):
    speaker = open_view("Settler_Mara")
    flags = NarrativeFlags()
    flags.set_flag("just_spoke")
    speaker.add(flags)
    world.add_entity(speaker)

    log = []
    # Added lowest priority first; the world reorders them
    world.add_system(ViewCounter(log))
    world.add_system(FlagSweeper(log))
    world.update(1.0)

    assert log == ["FlagSweeper", "ViewCounter"]
    assert not flags.has_flag("just_spoke")

def test_system_add_remove(world):
    system = ViewCounter()

    world.add_system(system)
    assert system.world is world
    assert world.get_system(ViewCounter) is system

    world.remove_system(system)
    assert world.get_system(ViewCounter) is None
    with pytest.raises(RuntimeError):
        _ = system.world
