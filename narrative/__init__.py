"""
Narrative module.

Camp conversations built on top of the engine:
- Components (flags, settler profiles, dialogue view)
- Dialogue (assets, conditions, variables, inventory gates, sessions)
- World (NPC factories, camp roster, global progression)
- Systems (dialogue presentation and input)
"""
