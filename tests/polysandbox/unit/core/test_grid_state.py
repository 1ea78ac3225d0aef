import pytest

from gridkit.runtime.events import EventBus
from gridkit.ui_runtime.geometry import CellCoord
from polysandbox.core.events import GridStateChanged
from polysandbox.core.grid_state import GridStateStore
from polysandbox.core.models import RotationPolicy, WallSegment, cells_for_piece

T_PATTERN = ((1, 1, 1), (0, 1, 0))
SQUARE = ((1, 1), (1, 1))
I_PATTERN = ((1, 1, 1, 1),)
FULL = tuple(tuple(1 for _ in range(5)) for _ in range(5))


def _recorder(store: GridStateStore) -> list[GridStateChanged]:
    seen: list[GridStateChanged] = []
    store.events.subscribe(GridStateChanged, seen.append)
    return seen


def test_place_creates_piece_with_canonical_pattern(store: GridStateStore) -> None:
    piece_id = store.place_or_move(None, "T", T_PATTERN, "#a000f0", 1, 1)
    assert piece_id == "piece-1"
    piece = store.get(piece_id)
    assert piece is not None
    assert piece.rotation_degrees == 0
    assert piece.original_pattern == T_PATTERN
    assert piece.current_pattern == T_PATTERN
    assert store.revision() == 1


def test_place_rejects_out_of_bounds_without_event(store: GridStateStore) -> None:
    seen = _recorder(store)
    assert store.place_or_move(None, "O", SQUARE, "#fff", 4, 4) is None
    assert store.pieces() == ()
    assert seen == []
    assert store.revision() == 0


def test_move_keeps_identity_rotation_and_z_order(store: GridStateStore) -> None:
    first = store.place_or_move(None, "T", T_PATTERN, "#a", 0, 0)
    second = store.place_or_move(None, "O", SQUARE, "#b", 3, 3)
    assert first is not None and second is not None
    store.rotate(first)
    rotated = store.get(first)
    assert rotated is not None

    moved_id = store.place_or_move(first, "T", rotated.current_pattern, "#a", 2, 2)

    assert moved_id == first
    assert [piece.id for piece in store.pieces()] == [first, second]
    moved = store.get(first)
    assert moved is not None
    assert (moved.anchor_row, moved.anchor_col) == (2, 2)
    assert moved.rotation_degrees == 90
    assert moved.original_pattern == T_PATTERN


def test_move_is_a_single_observable_transition(store: GridStateStore) -> None:
    piece_id = store.place_or_move(None, "O", SQUARE, "#a", 0, 0)
    assert piece_id is not None
    observed: list[tuple[str, bool, int]] = []

    def on_change(event: GridStateChanged) -> None:
        observed.append((event.reason, store.get(piece_id) is not None, len(store.pieces())))

    store.events.subscribe(GridStateChanged, on_change)
    store.place_or_move(piece_id, "O", SQUARE, "#a", 3, 3)

    assert observed == [("moved", True, 1)]


def test_unknown_id_creates_piece_with_that_id(store: GridStateStore) -> None:
    assert store.place_or_move("custom", "O", SQUARE, "#a", 0, 0) == "custom"
    assert store.place_or_move(None, "O", SQUARE, "#a", 0, 0) == "piece-1"


def test_overlap_is_permitted_and_topmost_wins(store: GridStateStore) -> None:
    assert store.place_or_move(None, "full", FULL, "#111111", 0, 0) is not None
    assert store.place_or_move(None, "full", FULL, "#222222", 0, 0) is not None
    assert len(store.pieces()) == 2
    assert store.occupant_color(2, 2) == "#222222"
    assert store.occupant_color(4, 4) == "#222222"


def test_occupant_color_empty_cell(store: GridStateStore) -> None:
    store.place_or_move(None, "T", T_PATTERN, "#a", 0, 0)
    assert store.occupant_color(1, 0) is None
    assert store.occupant_color(1, 1) == "#a"


def test_remove_and_unknown_remove(store: GridStateStore) -> None:
    piece_id = store.place_or_move(None, "O", SQUARE, "#a", 0, 0)
    assert piece_id is not None
    seen = _recorder(store)
    assert not store.remove("missing")
    assert seen == []
    assert store.remove(piece_id)
    assert store.pieces() == ()
    assert [event.reason for event in seen] == ["removed"]


def test_rotate_advances_degrees_and_cycles(store: GridStateStore) -> None:
    piece_id = store.place_or_move(None, "T", T_PATTERN, "#a", 0, 0)
    assert piece_id is not None
    assert store.rotate(piece_id)
    piece = store.get(piece_id)
    assert piece is not None
    assert piece.current_pattern == ((0, 1), (1, 1), (0, 1))
    assert piece.rotation_degrees == 90
    for _ in range(3):
        store.rotate(piece_id)
    piece = store.get(piece_id)
    assert piece is not None
    assert piece.rotation_degrees == 0
    assert piece.current_pattern == T_PATTERN
    assert not store.rotate("missing")


def test_rotate_turns_the_installed_pattern(store: GridStateStore) -> None:
    piece_id = store.place_or_move(None, "T", T_PATTERN, "#a", 0, 0)
    assert piece_id is not None
    store.place_or_move(piece_id, "T", ((1, 1),), "#a", 0, 0)

    assert store.rotate(piece_id)

    piece = store.get(piece_id)
    assert piece is not None
    assert piece.current_pattern == ((1,), (1,))
    assert piece.original_pattern == T_PATTERN
    assert piece.rotation_degrees == 90


def test_rotate_allow_policy_keeps_anchor_past_edge(store: GridStateStore) -> None:
    piece_id = store.place_or_move(None, "I", I_PATTERN, "#a", 4, 0)
    assert piece_id is not None
    assert store.rotate(piece_id)
    piece = store.get(piece_id)
    assert piece is not None
    assert (piece.anchor_row, piece.anchor_col) == (4, 0)
    assert CellCoord(7, 0) in cells_for_piece(piece)


def test_rotate_clamp_policy_shifts_anchor_inside() -> None:
    store = GridStateStore(5, rotation_policy=RotationPolicy.CLAMP)
    piece_id = store.place_or_move(None, "I", I_PATTERN, "#a", 4, 0)
    assert piece_id is not None
    assert store.rotate(piece_id)
    piece = store.get(piece_id)
    assert piece is not None
    assert (piece.anchor_row, piece.anchor_col) == (1, 0)
    assert piece.rotation_degrees == 90


def test_rotate_reject_policy_leaves_piece_untouched() -> None:
    store = GridStateStore(5, rotation_policy=RotationPolicy.REJECT)
    piece_id = store.place_or_move(None, "I", I_PATTERN, "#a", 4, 0)
    assert piece_id is not None
    revision = store.revision()
    assert not store.rotate(piece_id)
    piece = store.get(piece_id)
    assert piece is not None
    assert piece.current_pattern == I_PATTERN
    assert piece.rotation_degrees == 0
    assert store.revision() == revision


def test_toggle_wall_twice_restores_state(store: GridStateStore) -> None:
    assert store.toggle_wall("h-0-2")
    assert store.has_wall("h-0-2")
    assert store.walls() == [WallSegment.parse("h-0-2")]
    assert store.toggle_wall("h-0-2")
    assert not store.has_wall("h-0-2")
    assert store.walls() == []


def test_toggle_wall_ignores_malformed_and_out_of_range(store: GridStateStore) -> None:
    seen = _recorder(store)
    assert not store.toggle_wall("h-6-0")
    assert not store.toggle_wall("v-0-6")
    assert not store.toggle_wall("wall")
    assert not store.has_wall("nonsense")
    assert seen == []


def test_walls_edge_ranges(store: GridStateStore) -> None:
    assert store.toggle_wall("h-5-4")
    assert store.toggle_wall("v-4-5")
    assert [segment.id for segment in store.walls()] == ["h-5-4", "v-4-5"]


def test_toggle_mark_by_coord_and_id(store: GridStateStore) -> None:
    assert store.toggle_mark(CellCoord(1, 2))
    assert store.is_marked("1-2")
    assert store.marks() == [CellCoord(1, 2)]
    assert store.toggle_mark("1-2")
    assert store.marks() == []
    assert not store.toggle_mark(CellCoord(5, 0))
    assert not store.toggle_mark("bad")


def test_clear_pieces_and_walls_leave_marks(store: GridStateStore) -> None:
    store.place_or_move(None, "O", SQUARE, "#a", 0, 0)
    store.toggle_wall("v-1-1")
    store.toggle_mark("2-2")
    store.clear_pieces()
    store.clear_walls()
    assert store.pieces() == ()
    assert store.walls() == []
    assert store.marks() == [CellCoord(2, 2)]


def test_clear_on_empty_state_publishes_nothing(store: GridStateStore) -> None:
    seen = _recorder(store)
    store.clear_pieces()
    store.clear_walls()
    assert seen == []


def test_revision_counts_effective_mutations() -> None:
    bus = EventBus()
    store = GridStateStore(4, event_bus=bus)
    seen: list[GridStateChanged] = []
    bus.subscribe(GridStateChanged, seen.append)
    store.place_or_move(None, "O", SQUARE, "#a", 0, 0)
    store.toggle_wall("h-0-0")
    store.toggle_mark("0-0")
    assert [event.revision for event in seen] == [1, 2, 3]
    assert [event.reason for event in seen] == ["placed", "wall_toggled", "mark_toggled"]
    assert seen[0].piece_id == "piece-1"


def test_invalid_size_rejected() -> None:
    with pytest.raises(ValueError):
        GridStateStore(0)
