import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from narrative.config import NarrativeConfig, setup_logging
from narrative.dialogue.loader import DialogueLoader
from narrative.components.narrative import CharacterType
from narrative.dialogue.selector import DialogueSelector


def main():
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("data/narrative.json")
    config = NarrativeConfig.load(config_path) if config_path.exists() else NarrativeConfig()

    setup_logging(config.log_level)
    logger = logging.getLogger("DialogueVerification")

    loader = DialogueLoader(Path(config.dialogue_path))
    asset_ids = loader.available_ids()
    logger.info(f"Checking {len(asset_ids)} dialogue assets in {config.dialogue_path}")

    assets = loader.load_all()
    failed = [asset_id for asset_id in asset_ids if asset_id not in assets]

    # Every asset's links must point at lines it defines
    for asset_id, asset in assets.items():
        index = asset.build_line_index()
        for start in asset.conditional_starts:
            if start.line_id not in index:
                logger.error(f"{asset_id}: conditional start -> unknown line '{start.line_id}'")
                failed.append(asset_id)
        for line in asset.lines:
            targets = [line.next_line] + [option.next_line for option in line.options]
            for target in filter(None, targets):
                if target not in index:
                    logger.error(f"{asset_id}: line '{line.id}' -> unknown line '{target}'")
                    failed.append(asset_id)

    if config.fallback_asset not in assets:
        logger.error(f"Fallback asset '{config.fallback_asset}' is missing")
        failed.append(config.fallback_asset)

    selector = DialogueSelector(
        loader,
        mappings=config.character_dialogue_mappings,
        fallback_asset=config.fallback_asset,
    )
    for character_type in CharacterType:
        candidates = selector.candidates_for(character_type)
        logger.info(f"{character_type.name}: {', '.join(a.asset_id for a in candidates) or '-'}")

    if failed:
        logger.error(f"VERIFICATION FAILED: {', '.join(sorted(set(failed)))}")
        sys.exit(1)

    logger.info("VERIFICATION SUCCESSFUL: All dialogue assets loaded and validated.")


if __name__ == "__main__":
    main()
