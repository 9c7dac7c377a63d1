import pytest

from zettel.errors import LevelMismatchError, MalformedIdError, NoRoomForInsertionError
from zettel.ids import (
    compare_ids,
    generate_child_id,
    generate_sibling_id,
    id_sort_key,
    is_child_of,
    is_descendant_of,
    is_sibling_of,
    parent_of,
    parse_id,
    render_id,
)


@pytest.mark.parametrize("raw", ["10", "10-20", "10-20-5", "0", "3-0-7"])
def test_parse_render_round_trip(raw: str) -> None:
    assert render_id(parse_id(raw)) == raw


def test_parse_id_segments() -> None:
    assert parse_id("10-20-5") == (10, 20, 5)
    assert parse_id(" 10-2 ") == (10, 2)


def test_parse_id_accepts_int() -> None:
    assert parse_id(10) == (10,)


@pytest.mark.parametrize("raw", ["", "-10", "10-", "10--20", "a", "10-x", "1.5", "+3", "-1", True, -4, None, 2.0])
def test_parse_id_rejects_malformed(raw) -> None:
    with pytest.raises(MalformedIdError):
        parse_id(raw)


def test_compare_ids_is_numeric_not_string() -> None:
    assert compare_ids("9", "10") < 0
    assert compare_ids("10", "9") > 0
    assert compare_ids("10-2", "10-10") < 0
    assert compare_ids("10-20", "10-20") == 0


def test_compare_ids_prefix_sorts_first() -> None:
    assert compare_ids("10", "10-0") == -1
    assert compare_ids("10-20-5", "10-20") == 1


def test_compare_ids_total_order() -> None:
    ids = ["10-20-5", "9", "10", "10-3", "10-20", "100", "10-100", "2-1"]
    ordered = sorted(ids, key=id_sort_key)
    assert ordered == ["2-1", "9", "10", "10-3", "10-20", "10-20-5", "10-100", "100"]
    for a, b in zip(ordered, ordered[1:]):
        assert compare_ids(a, b) == -1
        assert compare_ids(b, a) == 1


def test_relations() -> None:
    assert is_child_of("10-20", "10")
    assert not is_child_of("10-20-5", "10")
    assert not is_child_of("100-2", "10")
    assert is_descendant_of("10-20-5", "10")
    assert not is_descendant_of("10", "10")
    assert is_sibling_of("10-20", "10-30")
    assert is_sibling_of("10", "40")
    assert not is_sibling_of("10-20", "11-30")
    assert parent_of("10-20-5") == (10, 20)
    assert parent_of("10") is None


def test_sibling_without_next_steps_by_ten() -> None:
    assert generate_sibling_id("10", None) == "20"
    assert generate_sibling_id("10-20", None) == "10-30"


def test_sibling_between_two_takes_midpoint() -> None:
    assert generate_sibling_id("10", "20") == "15"
    assert generate_sibling_id("10-20", "10-25") == "10-22"


def test_sibling_adjacent_ids_have_no_room() -> None:
    with pytest.raises(NoRoomForInsertionError):
        generate_sibling_id("10", "11")


def test_sibling_out_of_order_has_no_room() -> None:
    with pytest.raises(NoRoomForInsertionError):
        generate_sibling_id("20", "10")


def test_sibling_level_mismatch() -> None:
    with pytest.raises(LevelMismatchError):
        generate_sibling_id("10", "10-20")


def test_sibling_from_another_parent_is_rejected() -> None:
    with pytest.raises(LevelMismatchError):
        generate_sibling_id("10-20", "11-30")


def test_child_without_children() -> None:
    assert generate_child_id("10", None) == "10-10"
    assert generate_child_id("10-20", None) == "10-20-10"


def test_child_before_first_child() -> None:
    assert generate_child_id("10", "10-20") == "10-10"
    assert generate_child_id("10", "10-4") == "10-2"
    assert generate_child_id("10", "10-1") == "10-0"


def test_child_before_zero_has_no_room() -> None:
    with pytest.raises(NoRoomForInsertionError):
        generate_child_id("10", "10-0")


def test_child_level_mismatch() -> None:
    with pytest.raises(LevelMismatchError):
        generate_child_id("10", "10-20-5")
    with pytest.raises(LevelMismatchError):
        generate_child_id("10", "20")


def test_child_from_another_branch_is_rejected() -> None:
    with pytest.raises(LevelMismatchError):
        generate_child_id("10", "11-5")
    with pytest.raises(LevelMismatchError):
        generate_child_id("10-20", "10-30-4")


@pytest.mark.parametrize("segments", [(), (-3,), (10, -1), (True,), (10, "20"), (1.0,)])
def test_tuple_ids_are_validated(segments) -> None:
    with pytest.raises(MalformedIdError):
        render_id(segments)
    with pytest.raises(MalformedIdError):
        compare_ids(segments, "1")


def test_tuple_ids_are_accepted_when_valid() -> None:
    assert render_id((10, 0, 5)) == "10-0-5"
    assert compare_ids((9,), "10") == -1
