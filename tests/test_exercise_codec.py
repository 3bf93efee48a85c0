"""
运动明细解析测试
测试 exercises 文本的解码规则，以及与 Exercise 行之间的展开和还原
"""

from types import SimpleNamespace

from healthapp.core.exercise_codec import (
    ExerciseEntry,
    decode_exercises,
    flatten_exercises,
    group_exercise_rows,
)


def test_decode_empty_and_none():
    assert decode_exercises("") == {}
    assert decode_exercises(None) == {}


def test_decode_single_entry():
    assert decode_exercises("Pushups: reps 20 count") == {
        "Pushups": [ExerciseEntry("reps", "20", "count")]
    }


def test_decode_preserves_name_order():
    decoded = decode_exercises("A: x 1 y, B: z 2 w")
    assert list(decoded) == ["A", "B"]
    assert decoded["A"] == [("x", "1", "y")]
    assert decoded["B"] == [("z", "2", "w")]


def test_decode_groups_repeated_names_in_input_order():
    decoded = decode_exercises("Run: distance 5 km, Swim: laps 10 count, Run: time 30 min")
    assert list(decoded) == ["Run", "Swim"]
    assert decoded["Run"] == [("distance", "5", "km"), ("time", "30", "min")]


def test_decode_drops_entry_without_separator():
    assert decode_exercises("NoColonHere") == {}
    assert decode_exercises("NoColonHere, Plank: time 60 s") == {"Plank": [("time", "60", "s")]}


def test_decode_drops_entry_with_too_few_tokens():
    assert decode_exercises("Pushups: reps 20") == {}


def test_decode_drops_entry_with_two_name_separators():
    assert decode_exercises("A: b: c 1 d") == {}


def test_decode_ignores_extra_tokens_and_trims_name():
    decoded = decode_exercises("  Bench Press : weight 60 kg heavy")
    assert decoded == {"Bench Press": [("weight", "60", "kg")]}


def test_decode_comma_inside_value_misparses_silently():
    # "1, 5" 被当作两个条目切开，两段都不满足格式
    assert decode_exercises("Row: pace 1, 5 min") == {}


def test_flatten_and_group_round_trip_rows():
    decoded = decode_exercises("A: x 1 y, B: z 2 w, A: q 3 r")
    rows = flatten_exercises(decoded)
    assert rows == [
        ("A", ("x", "1", "y")),
        ("A", ("q", "3", "r")),
        ("B", ("z", "2", "w")),
    ]
    stored = [
        SimpleNamespace(exercise_name=name, metric=e.metric, value=e.value, unit=e.unit)
        for name, e in rows
    ]
    assert group_exercise_rows(stored) == decoded
