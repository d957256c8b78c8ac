"""Tests for the SQLAlchemy-backed route store."""
import pytest

from app.models.route_models import RoutePointIn
from app.services.route_store import MS_PER_DAY, RouteNotFound, days_since

from conftest import SF_POINTS, route_points


class TestMarkers:
    def test_add_and_list(self, store):
        a = store.add_marker(1.0, 2.0)
        b = store.add_marker(3.0, 4.0)
        assert [m.id for m in store.list_markers()] == [a.id, b.id]
        assert (b.latitude, b.longitude) == (3.0, 4.0)

    def test_clear(self, store):
        store.add_marker(1.0, 2.0)
        store.add_marker(3.0, 4.0)
        assert store.clear_markers() == 2
        assert store.list_markers() == []


class TestCreateRoute:
    def test_points_keep_input_order(self, store):
        route = store.create_route("Bay walk", route_points())
        points = store.list_route_points(route.id)
        assert [p.sequence for p in points] == [0, 1, 2]
        assert [(p.latitude, p.longitude) for p in points] == SF_POINTS

    def test_name_is_stripped(self, store):
        assert store.create_route("  Bay walk  ", route_points()).name == "Bay walk"

    def test_needs_two_points(self, store):
        with pytest.raises(ValueError, match="at least 2 points"):
            store.create_route("Too short", route_points(SF_POINTS[:1]))

    @pytest.mark.parametrize("name", ["", "   "])
    def test_needs_a_name(self, store, name):
        with pytest.raises(ValueError, match="name"):
            store.create_route(name, route_points())

    def test_created_at_from_clock(self, store):
        first = store.create_route("a", route_points())
        second = store.create_route("b", route_points())
        assert second.created_at > first.created_at

    def test_from_markers_clears_markers(self, store):
        for lat, lon in SF_POINTS:
            store.add_marker(lat, lon)
        route = store.create_route_from_markers("From pins")

        assert store.list_markers() == []
        points = store.list_route_points(route.id)
        assert [(p.latitude, p.longitude) for p in points] == SF_POINTS
        # Source markers are gone; the copied coordinates stay.
        assert all(p.marker_id is None for p in points)

    def test_from_markers_needs_two(self, store):
        store.add_marker(1.0, 1.0)
        with pytest.raises(ValueError):
            store.create_route_from_markers("Lonely")
        assert len(store.list_markers()) == 1

    def test_explicit_marker_ids_are_kept(self, store):
        m = store.add_marker(1.0, 1.0)
        points = [
            RoutePointIn(marker_id=m.id, latitude=1.0, longitude=1.0),
            RoutePointIn(latitude=2.0, longitude=2.0),
        ]
        route = store.create_route("Mixed", points)
        assert [p.marker_id for p in store.list_route_points(route.id)] == [m.id, None]


class TestListAndDelete:
    def test_newest_first(self, store):
        a = store.create_route("a", route_points())
        b = store.create_route("b", route_points())
        c = store.create_route("c", route_points())
        assert [r.id for r in store.list_routes()] == [c.id, b.id, a.id]
        assert store.most_recent_route().id == c.id

    def test_no_routes(self, store):
        assert store.list_routes() == []
        assert store.most_recent_route() is None

    def test_get_missing(self, store):
        with pytest.raises(RouteNotFound):
            store.get_route(12345)

    def test_not_found_is_lookup_error(self):
        assert issubclass(RouteNotFound, LookupError)

    def test_delete_cascades_to_points(self, store):
        keep = store.create_route("keep", route_points())
        gone = store.create_route("gone", route_points())
        store.delete_route(gone.id)

        assert [r.id for r in store.list_routes()] == [keep.id]
        assert store.list_route_points(gone.id) == []
        assert len(store.list_route_points(keep.id)) == 3

    def test_delete_missing(self, store):
        with pytest.raises(RouteNotFound):
            store.delete_route(999)


def test_days_since():
    assert days_since(0, now=0) == 0
    assert days_since(0, now=MS_PER_DAY - 1) == 0
    assert days_since(0, now=3 * MS_PER_DAY + 5) == 3
    # Clock skew never yields negative days.
    assert days_since(10 * MS_PER_DAY, now=0) == 0
