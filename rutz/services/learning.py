# Filename: rutz/services/learning.py

from typing import Iterable, List

from rutz.schemas import LearningModule, UserLearningProgress

DIFFICULTY_ORDER = {"beginner": 0, "intermediate": 1, "advanced": 2}


def sort_modules(modules: Iterable[LearningModule]) -> List[LearningModule]:
    return sorted(modules, key=lambda m: (DIFFICULTY_ORDER.get(m.difficulty, 99), m.title))


def merged_progress(previous: int, requested: int) -> int:
    # progress never goes backwards
    return min(100, max(previous, requested))


def status_for(progress: int) -> str:
    return "completed" if progress >= 100 else "in_progress"


def overall_progress(rows: Iterable[UserLearningProgress], modules: List[LearningModule]) -> int:
    """Mean progress over the active modules (missing rows count as 0)."""
    if not modules:
        return 0
    active = {m.id for m in modules}
    total = sum(r.progress for r in rows if r.module_id in active)
    return round(total / len(modules))
