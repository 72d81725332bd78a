"""GenerationHistory navigation tests."""

from __future__ import annotations

import pytest

from modules.services.history_service import GenerationHistory


def build_history(count: int) -> GenerationHistory:
    history = GenerationHistory()
    for index in range(count):
        history.record_result(f"src-{index}", f"res-{index}", f"prompt {index}")
    return history


def test_empty_history_has_no_current():
    history = GenerationHistory()

    assert len(history) == 0
    assert history.current() is None
    assert history.current_index == 0


def test_record_result_prepends_and_resets_cursor():
    history = build_history(3)
    history.jump_to(2)

    record = history.record_result("src-new", "res-new", "newest")

    assert len(history) == 4
    assert history.current_index == 0
    assert history.current() is record
    assert [item.result for item in history][:2] == ["res-new", "res-2"]


def test_record_ids_are_unique():
    history = build_history(25)

    assert len({record.id for record in history}) == 25


def test_records_are_immutable():
    history = build_history(1)

    with pytest.raises(AttributeError):
        history.current().prompt = "changed"  # type: ignore[misc]


def test_missing_source_is_stored_as_empty_string():
    history = GenerationHistory()

    record = history.record_result(None, "res", "prompt")  # type: ignore[arg-type]

    assert record.source == ""


@pytest.mark.parametrize("count", [2, 3, 7])
def test_step_backward_reaches_oldest_and_clamps(count):
    history = build_history(count)

    for _ in range(count - 1):
        history.step_backward()
    assert history.current_index == count - 1
    assert history.current().result == "res-0"

    history.step_backward()
    assert history.current_index == count - 1


@pytest.mark.parametrize("count", [2, 5])
def test_step_forward_returns_to_newest_and_clamps(count):
    history = build_history(count)
    history.jump_to(count - 1)

    for _ in range(count - 1):
        history.step_forward()
    assert history.current_index == 0

    history.step_forward()
    assert history.current_index == 0


def test_steps_are_noops_with_single_record():
    history = build_history(1)

    history.step_backward()
    history.step_forward()

    assert history.current_index == 0


def test_jump_to_selects_record():
    history = build_history(4)

    history.jump_to(2)

    assert history.current() is history.records[2]


@pytest.mark.parametrize("index", [-1, 4, 100])
def test_jump_to_out_of_range_is_ignored(index):
    history = build_history(4)
    history.jump_to(1)

    history.jump_to(index)

    assert history.current_index == 1


def test_jump_to_on_empty_history_is_ignored():
    history = GenerationHistory()

    history.jump_to(0)

    assert history.current() is None


def test_has_older_and_newer():
    history = build_history(3)

    assert history.has_older() and not history.has_newer()
    history.jump_to(2)
    assert history.has_newer() and not history.has_older()
