from __future__ import annotations

import pytest
from pydantic import ValidationError

from durable_cell.policy import Debounced, Immediate, Manual, default_policy, parse_policy


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("immediate", Immediate()),
        ("Manual", Manual()),
        ("debounced", Debounced(seconds=2.0)),
        ("debounced:0.25", Debounced(seconds=0.25)),
        (" debounced: 5 ", Debounced(seconds=5)),
        ({"kind": "debounced", "seconds": 3}, Debounced(seconds=3)),
        ({"kind": "manual"}, Manual()),
    ],
)
def test_parse_policy(raw, expected):
    assert parse_policy(raw) == expected


@pytest.mark.parametrize("raw", ["", "sometimes", "immediate:1", "debounced:soon", "debounced:0", "debounced:-1", "debounced:inf", "debounced:nan"])
def test_parse_policy_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_policy(raw)


def test_debounce_delay_must_be_positive():
    with pytest.raises(ValidationError):
        Debounced(seconds=0)
    with pytest.raises(ValidationError):
        Debounced(seconds=float("inf"))


def test_policies_are_immutable():
    policy = Debounced(seconds=1)
    with pytest.raises(ValidationError):
        policy.seconds = 10


def test_default_policy_is_two_second_debounce(sandbox_root):
    assert default_policy() == Debounced(seconds=2.0)


def test_default_policy_from_environment(sandbox_root, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DURABLE_CELL_UPDATE_POLICY", "immediate")
    assert default_policy() == Immediate()
