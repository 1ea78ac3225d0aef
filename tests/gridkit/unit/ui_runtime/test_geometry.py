from gridkit.ui_runtime.geometry import Point, Rect


def test_rect_contains_is_edge_inclusive() -> None:
    rect = Rect(10.0, 20.0, 30.0, 40.0)
    assert rect.contains(10.0, 20.0)
    assert rect.contains(40.0, 60.0)
    assert not rect.contains(40.1, 30.0)
    assert not rect.contains(9.9, 30.0)


def test_point_offset_and_distance() -> None:
    offset = Point(5.0, 7.0).minus(Point(2.0, 3.0))
    assert offset == Point(3.0, 4.0)
    assert offset.distance_to(Point(0.0, 0.0)) == 5.0
