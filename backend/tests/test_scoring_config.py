"""Tests for the scoring point table and its YAML loader."""

import pytest

from babylog.schemas.scoring import ScoringConfig
from babylog.services.scoring_service import DATA_DIR, load_scoring_config


def test_default_points():
    config = ScoringConfig()
    assert config.activity_points_for("feeding") == 5
    assert config.activity_points_for("vaccination") == 15
    assert config.activity_points_for("milestone") == 20
    assert config.todo_points_for("high") == 8
    assert config.daily_signin_points == 2


def test_unknown_keys_use_fallback():
    config = ScoringConfig()
    assert config.activity_points_for("bath") == 1
    assert config.todo_points_for("someday") == 1


def test_shipped_yaml_matches_defaults():
    assert load_scoring_config(DATA_DIR / "default.yaml") == ScoringConfig()


def test_empty_path_uses_defaults():
    assert load_scoring_config("") == ScoringConfig()
    assert load_scoring_config(None) == ScoringConfig()


def test_partial_yaml_keeps_other_defaults(tmp_path):
    path = tmp_path / "points.yaml"
    path.write_text("daily_signin_points: 10\ntodo_points:\n  high: 12\n", encoding="utf-8")

    config = load_scoring_config(path)
    assert config.daily_signin_points == 10
    assert config.todo_points_for("high") == 12
    assert config.todo_points_for("low") == 1  # table replaced, not merged
    assert config.activity_points_for("feeding") == 5


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scoring_config(tmp_path / "nope.yaml")


def test_signin_points_must_be_positive():
    with pytest.raises(ValueError):
        ScoringConfig(daily_signin_points=0)


@pytest.mark.parametrize("points", [-5, 0])
def test_table_points_must_be_positive(points):
    with pytest.raises(ValueError):
        ScoringConfig(activity_points={"feeding": points})
    with pytest.raises(ValueError):
        ScoringConfig(todo_points={"high": points})


def test_yaml_with_negative_points_is_rejected(tmp_path):
    path = tmp_path / "points.yaml"
    path.write_text("activity_points:\n  feeding: -5\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_scoring_config(path)


def test_configured_points_are_not_replaced_by_fallback():
    config = ScoringConfig(activity_points={"feeding": 7}, fallback_points=3)
    assert config.activity_points_for("feeding") == 7
    assert config.activity_points_for("sleep") == 3
