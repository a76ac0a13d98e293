# Filename: rutz/services/impact.py
# Community-project and milestone mutation rules. Storage backends build
# the merged field dict with these helpers before writing it.

from decimal import Decimal
from typing import Any, Dict

from rutz.errors import InvariantViolation
from rutz.utils import utcnow


def funding_percentage(current_funding: Decimal, funding_goal: Decimal) -> float:
    if not funding_goal:
        return 0.0
    return round(float(current_funding / funding_goal * 100), 2)


def check_funding(funding_goal: Decimal, current_funding: Decimal) -> None:
    if current_funding > funding_goal:
        raise InvariantViolation(
            f"currentFunding ({current_funding}) exceeds fundingGoal ({funding_goal})"
        )


def project_changes(current: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Validated field changes for a project update.

    `current` is the stored row as a dict, `updates` the fields the caller set.
    Sets completion_date when the status moves to completed.
    """
    changes = dict(updates)
    check_funding(
        changes.get("funding_goal", current["funding_goal"]),
        changes.get("current_funding", current["current_funding"]),
    )
    if (changes.get("status") == "completed" and current["status"] != "completed"
            and not changes.get("completion_date")):
        changes["completion_date"] = utcnow()
    changes["last_updated"] = utcnow()
    return changes


def milestone_changes(current: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    changes = dict(updates)
    if changes.get("is_achieved") and not current["is_achieved"] and not changes.get("achieved_date"):
        changes["achieved_date"] = utcnow()
    return changes
