# tests/test_navigation.py
from __future__ import annotations

import sys
from pathlib import Path

# Make the package importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from localcooks.store import calculate_next_step_id, calculate_prev_step_id, clamp_step_id
from localcooks.step_definitions import TOTAL_STEPS, STEPS_BY_ID

def test_wizard_has_three_steps() -> None:
    assert TOTAL_STEPS == 3
    assert [STEPS_BY_ID[i]['name'] for i in (1, 2, 3)] == ['personal_info', 'kitchen_preference', 'certifications']

def test_calculate_next_step() -> None:
    """Tests the logic for calculating the next step ID."""
    # From the first step
    assert calculate_next_step_id(1, 3) == 2, "Should go from 1 to 2"

    # From a middle step
    assert calculate_next_step_id(2, 3) == 3, "Should go from a middle step to the next"

    # From the last step
    assert calculate_next_step_id(3, 3) == 3, "Should stay on the last step"

    # From out-of-range steps
    assert calculate_next_step_id(0, 3) == 1, "Should land on the first step from below the range"
    assert calculate_next_step_id(99, 3) == 3, "Should stay clamped to the last step"

def test_calculate_prev_step() -> None:
    """Tests the logic for calculating the previous step ID."""
    # From a middle step
    assert calculate_prev_step_id(2, 3) == 1, "Should go from a middle step to the previous"

    # From the last step
    assert calculate_prev_step_id(3, 3) == 2, "Should go from the last step back one"

    # From the first step
    assert calculate_prev_step_id(1, 3) == 1, "Should stay on the first step"

    # From out-of-range steps
    assert calculate_prev_step_id(99, 3) == 3, "Should come back into range at the last step"
    assert calculate_prev_step_id(-4, 3) == 1, "Should stay clamped to the first step"

def test_clamp_step_id() -> None:
    assert clamp_step_id(0) == 1
    assert clamp_step_id(2) == 2
    assert clamp_step_id(TOTAL_STEPS + 5) == TOTAL_STEPS
