# Filename: rutz/services/journey.py
# Journey-stage rules shared by both storage backends.

from typing import List, Optional

from rutz.schemas import (
    JourneyStage,
    StageProgression,
    StageRequirements,
    User,
    UserJourneyProgress,
)

XP_PER_LEVEL = 1000


def level_for_xp(total_xp: int) -> int:
    """Level derived from the running XP total (1000 XP per level)."""
    return total_xp // XP_PER_LEVEL + 1


def requirements_met(requirements: StageRequirements, user: User) -> bool:
    """True only when every defined threshold is met; unset thresholds are ignored.

    min_purchases is measured against the user's total spend.
    """
    if requirements.min_purchases is not None and user.total_spent < requirements.min_purchases:
        return False
    if requirements.min_loyalty_points is not None and user.loyalty_points < requirements.min_loyalty_points:
        return False
    if (requirements.min_learning_progress is not None
            and user.learning_progress < requirements.min_learning_progress):
        return False
    return True


def next_stage(stages: List[JourneyStage], current_stage_id: Optional[str]) -> Optional[JourneyStage]:
    """Stage after `current_stage_id` in `stages` (already sorted by order)."""
    ids = [s.id for s in stages]
    index = ids.index(current_stage_id) if current_stage_id in ids else -1
    if index + 1 < len(stages):
        return stages[index + 1]
    return None


def evaluate_stage_progression(user: Optional[User],
                               progress: Optional[UserJourneyProgress],
                               stages: List[JourneyStage]) -> StageProgression:
    if user is None or progress is None:
        return StageProgression(can_advance=False)
    candidate = next_stage(stages, progress.current_stage_id)
    if candidate is None or not requirements_met(candidate.requirements, user):
        return StageProgression(can_advance=False)
    return StageProgression(can_advance=True, next_stage=candidate)
