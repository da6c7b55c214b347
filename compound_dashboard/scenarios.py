"""Scenario list management and per-scenario completion markers.

All helpers take the current list (or marker mapping) and return a new
one, so the Streamlit pages can keep the loaded snapshot untouched until
they decide to save.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import SCENARIO_DEFAULTS
from .models import Scenario, new_id, utc_now_iso

EDITABLE_FIELDS = {'name', 'principal', 'daily_rate_percent', 'days', 'daily_contribution'}

Markers = Mapping[str, Iterable[int]]


@dataclass(frozen=True)
class CompletionProgress:
    done: int
    total: int

    @property
    def ratio(self) -> float:
        return self.done / self.total if self.total else 0.0


def new_scenario(
    scenarios: Sequence[Scenario],
    now: Optional[str] = None,
    name: Optional[str] = None,
) -> Scenario:
    """A scenario with the default parameters, named after its position unless ``name`` is given."""
    return Scenario(
        id=new_id(),
        name=name or f"Scenario {len(scenarios) + 1}",
        updated_at=now or utc_now_iso(),
        **SCENARIO_DEFAULTS,
    )


def find_scenario(scenarios: Sequence[Scenario], scenario_id: Optional[str]) -> Optional[Scenario]:
    for scenario in scenarios:
        if scenario.id == scenario_id:
            return scenario
    return None


def update_scenario(
    scenarios: Sequence[Scenario],
    scenario_id: str,
    now: Optional[str] = None,
    **changes: str,
) -> List[Scenario]:
    """Patch one scenario's editable fields and stamp ``updated_at``.

    Raises:
        ValueError: If ``changes`` names a field that cannot be edited
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update scenario fields: {', '.join(sorted(unknown))}")
    values = {key: '' if value is None else str(value) for key, value in changes.items()}
    stamp = now or utc_now_iso()
    return [
        dataclasses.replace(scenario, updated_at=stamp, **values) if scenario.id == scenario_id else scenario
        for scenario in scenarios
    ]


def delete_scenario(
    scenarios: Sequence[Scenario],
    scenario_id: str,
) -> Tuple[List[Scenario], Optional[str]]:
    """Remove a scenario; the first remaining one becomes current."""
    remaining = [scenario for scenario in scenarios if scenario.id != scenario_id]
    return remaining, (remaining[0].id if remaining else None)


def resolve_current(scenarios: Sequence[Scenario], current_id: Optional[str]) -> Optional[str]:
    if find_scenario(scenarios, current_id) is not None:
        return current_id
    return scenarios[0].id if scenarios else None


def completed_days(markers: Markers, scenario_id: str) -> List[int]:
    return sorted(set(markers.get(scenario_id, ())))


def toggle_day(markers: Markers, scenario_id: str, day: int) -> Dict[str, List[int]]:
    """Flip the done flag of one day of one scenario."""
    updated = {key: sorted(set(days)) for key, days in markers.items()}
    current = set(updated.get(scenario_id, []))
    current.symmetric_difference_update({int(day)})
    if current:
        updated[scenario_id] = sorted(current)
    else:
        updated.pop(scenario_id, None)
    return updated


def set_completed_days(markers: Markers, scenario_id: str, days: Iterable[int]) -> Dict[str, List[int]]:
    """Replace the done days of one scenario (used by the editable schedule table)."""
    updated = {key: sorted(set(values)) for key, values in markers.items()}
    cleaned = sorted({int(day) for day in days if int(day) > 0})
    if cleaned:
        updated[scenario_id] = cleaned
    else:
        updated.pop(scenario_id, None)
    return updated


def completion_progress(markers: Markers, scenario_id: str, days: int) -> CompletionProgress:
    """How many of the scenario's ``days`` are done; days past the horizon don't count."""
    total = max(0, int(days))
    done = sum(1 for day in set(markers.get(scenario_id, ())) if 1 <= day <= total)
    return CompletionProgress(done=done, total=total)


def prune_markers(markers: Markers, scenarios: Sequence[Scenario]) -> Dict[str, List[int]]:
    """Drop markers belonging to scenarios that no longer exist."""
    known = {scenario.id for scenario in scenarios}
    return {key: sorted(set(days)) for key, days in markers.items() if key in known and days}
