"""
YAML Stage Store for Code Escape

Loads the escape room stage catalogue from data/stages/escape_room.yaml.
Stages are read-only for the validator: it only needs a stage's points (the
maximum score) plus difficulty and hint to enrich its response.

See data/stages/escape_room.yaml for the catalogue format.
"""

import logging
import random
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..config import config
from ..models.stage import DIFFICULTY_ORDER, Difficulty, Stage

logger = logging.getLogger(__name__)

# Balanced question sets: two easy, one medium, one hard
BALANCED_QUOTA = {
    Difficulty.EASY: 2,
    Difficulty.MEDIUM: 1,
    Difficulty.HARD: 1,
}
DEFAULT_QUESTION_COUNT = 4


class StageStore:
    """
    Read-only access to the YAML stage catalogue.

    The file is loaded once at construction; call reload() to pick up edits.
    Malformed entries are logged and skipped so one bad stage never hides the
    rest of the catalogue.
    """

    def __init__(self, stages_file: Optional[str] = None):
        """
        Initialize the stage store.

        Args:
            stages_file: Path to the YAML catalogue (defaults to config.get_stages_file())
        """
        if stages_file is None:
            stages_file = config.get_stages_file()
        self.stages_file = Path(stages_file)
        self._stages: Dict[int, Stage] = {}
        self._load()

    def _load(self) -> None:
        stages: Dict[int, Stage] = {}

        if not self.stages_file.exists():
            logger.warning(f"Stage catalogue does not exist: {self.stages_file}")
            self._stages = stages
            return

        try:
            with open(self.stages_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse {self.stages_file.name}: {e}")
            self._stages = stages
            return

        if not isinstance(data, dict) or 'stages' not in data:
            logger.warning(f"No 'stages' key found in {self.stages_file.name}")
            self._stages = stages
            return

        for index, entry in enumerate(data.get('stages') or []):
            try:
                stage = Stage.model_validate(entry)
            except ValidationError as e:
                logger.error(f"Skipping invalid stage entry #{index} in {self.stages_file.name}: {e}")
                continue

            if stage.id in stages:
                logger.warning(f"Duplicate stage id {stage.id} in {self.stages_file.name}, keeping the first")
                continue
            stages[stage.id] = stage

        self._stages = stages
        logger.info(f"📚 Loaded {len(stages)} stage(s) from {self.stages_file}")

    def reload(self) -> None:
        """Re-read the catalogue from disk."""
        self._load()

    def get_stage(self, stage_id: int) -> Optional[Stage]:
        """Return the stage with this id, or None."""
        return self._stages.get(stage_id)

    def list_stages(self, include_inactive: bool = False) -> List[Stage]:
        """All stages ordered by id (active ones only unless include_inactive)."""
        stages = sorted(self._stages.values(), key=lambda s: s.id)
        if include_inactive:
            return stages
        return [s for s in stages if s.is_active]

    def select_questions(
        self,
        count: int = DEFAULT_QUESTION_COUNT,
        difficulty: Optional[Difficulty] = None,
        rng: Optional[random.Random] = None,
    ) -> List[Stage]:
        """
        Pick a set of active stages for one game.

        With a difficulty, a random sample of up to `count` stages of that
        difficulty. Otherwise a balanced set (two easy, one medium, one hard)
        topped up from the remaining stages when a level runs short.

        Args:
            count: Number of stages wanted
            difficulty: Restrict to a single difficulty
            rng: Random source (for reproducible selections)

        Returns:
            Selected stages ordered easy -> medium -> hard
        """
        rng = rng or random.Random()
        active = self.list_stages()
        count = max(0, count)

        if difficulty is not None:
            pool = [s for s in active if s.difficulty == difficulty]
            selected = rng.sample(pool, min(count, len(pool)))
        else:
            selected = []
            for level, quota in BALANCED_QUOTA.items():
                pool = [s for s in active if s.difficulty == level]
                selected.extend(rng.sample(pool, min(quota, len(pool))))

            if len(selected) < count:
                used = {s.id for s in selected}
                remaining = [s for s in active if s.id not in used]
                selected.extend(rng.sample(remaining, min(count - len(selected), len(remaining))))
            selected = selected[:count]

        return sorted(selected, key=lambda s: DIFFICULTY_ORDER[s.difficulty])
