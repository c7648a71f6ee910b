"""
Test the connection graph

Tests:
- Connection state derivation from either side
- Request / accept / remove lifecycle
- Duplicate and self requests
- Connection lists, requests and counts
- NEW_FOLLOWER fan-out on accept
"""
import pytest

from model.connection import Connection
from model.enums import ConnectionState, ContentStatus, NotificationType
from model.notification import Notification
from model.social.models import Post
from src.errors import ConflictError, NotFoundError
from src.social.connection_graph import ConnectionGraph, derive_connection_state
from src.social.notifications import NotificationFanout


@pytest.fixture
def graph(db_session):
    return ConnectionGraph(db_session, fanout=NotificationFanout(db_session))


# ===================================================================
# State derivation
# ===================================================================

class TestDeriveConnectionState:
    """Pure state derivation from a single row"""

    def test_no_row_is_add(self):
        assert derive_connection_state(None, 1) == ConnectionState.ADD

    def test_pending_row_from_both_sides(self):
        row = Connection(follower_id=1, following_id=2, pending=True)
        assert derive_connection_state(row, 1) == ConnectionState.REQUEST
        assert derive_connection_state(row, 2) == ConnectionState.ACCEPT

    def test_accepted_row_is_connected_for_both(self):
        row = Connection(follower_id=1, following_id=2, pending=False)
        assert derive_connection_state(row, 1) == ConnectionState.CONNECTED
        assert derive_connection_state(row, 2) == ConnectionState.CONNECTED

    def test_unrelated_user_is_add(self):
        row = Connection(follower_id=1, following_id=2, pending=False)
        assert derive_connection_state(row, 3) == ConnectionState.ADD


# ===================================================================
# Request
# ===================================================================

class TestRequestConnection:

    def test_request_sets_states_on_both_sides(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)

        assert graph.get_connection_state(alice.id, bob.id) == ConnectionState.REQUEST
        assert graph.get_connection_state(bob.id, alice.id) == ConnectionState.ACCEPT

    def test_second_request_in_either_direction_conflicts(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)

        with pytest.raises(ConflictError):
            graph.request_connection(alice.id, bob.id)
        with pytest.raises(ConflictError):
            graph.request_connection(bob.id, alice.id)

    def test_duplicate_row_from_race_conflicts(self, graph, db_session, alice, bob, monkeypatch):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)
        assert db_session.query(Notification).count() == 1

        # Both racing requests pass the lookup; the unique pair rejects the second insert
        monkeypatch.setattr(graph, "find_between", lambda user_id, other_id: None)
        with pytest.raises(ConflictError):
            graph.request_connection(alice.id, bob.id)
        monkeypatch.undo()

        assert db_session.query(Connection).count() == 1
        assert graph.get_connection_state(alice.id, bob.id) == ConnectionState.CONNECTED
        assert db_session.query(Notification).count() == 1

    def test_self_request_conflicts(self, graph, alice):
        with pytest.raises(ConflictError):
            graph.request_connection(alice.id, alice.id)

    def test_unknown_target(self, graph, alice):
        with pytest.raises(NotFoundError):
            graph.request_connection(alice.id, 9999)

    def test_request_creates_single_pending_row(self, graph, db_session, alice, bob):
        graph.request_connection(alice.id, bob.id)

        rows = db_session.query(Connection).all()
        assert len(rows) == 1
        assert rows[0].pending is True

    def test_request_does_not_notify(self, graph, db_session, alice, bob):
        graph.request_connection(alice.id, bob.id)
        assert db_session.query(Notification).count() == 0


# ===================================================================
# Accept
# ===================================================================

class TestAcceptConnection:

    def test_accept_connects_both_sides(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)

        assert graph.get_connection_state(alice.id, bob.id) == ConnectionState.CONNECTED
        assert graph.get_connection_state(bob.id, alice.id) == ConnectionState.CONNECTED
        assert graph.is_connected(alice.id, bob.id)
        assert graph.is_connected(bob.id, alice.id)

    def test_both_appear_in_each_others_connections(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)

        assert [c.user.id for c in graph.get_connections(alice.id)] == [bob.id]
        assert [c.user.id for c in graph.get_connections(bob.id)] == [alice.id]

    def test_accept_without_request(self, graph, alice, bob):
        with pytest.raises(NotFoundError):
            graph.accept_connection(alice.id, bob.id)

    def test_requester_cannot_accept_own_request(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        with pytest.raises(NotFoundError):
            graph.accept_connection(bob.id, alice.id)

    def test_accept_notifies_followed_user(self, graph, db_session, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)

        notifications = db_session.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].user_id == bob.id
        assert notifications[0].type == NotificationType.NEW_FOLLOWER
        assert notifications[0].data["follower_id"] == alice.id


# ===================================================================
# Remove
# ===================================================================

class TestRemoveConnection:

    def test_remove_resets_state(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)

        graph.remove_connection(alice.id, bob.id)

        assert graph.get_connection_state(alice.id, bob.id) == ConnectionState.ADD
        assert graph.get_connection_state(bob.id, alice.id) == ConnectionState.ADD

    def test_second_remove_fails(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.remove_connection(alice.id, bob.id)

        with pytest.raises(NotFoundError):
            graph.remove_connection(alice.id, bob.id)

    def test_remove_works_from_either_side(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.remove_connection(bob.id, alice.id)  # reject

        assert graph.find_between(alice.id, bob.id) is None

    def test_request_again_after_remove(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.remove_connection(alice.id, bob.id)

        graph.request_connection(bob.id, alice.id)
        assert graph.get_connection_state(bob.id, alice.id) == ConnectionState.REQUEST


# ===================================================================
# Lists and counts
# ===================================================================

class TestConnectionLists:

    def test_pending_rows_are_not_connections(self, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        assert graph.get_connections(alice.id) == []
        assert graph.get_connections(bob.id) == []

    def test_requests_list_only_incoming_pending(self, graph, alice, bob, carol):
        graph.request_connection(alice.id, bob.id)
        graph.request_connection(bob.id, carol.id)

        requests = graph.get_connection_requests(bob.id)
        assert len(requests) == 1
        assert requests[0].requester_id == alice.id
        assert requests[0].target_id == bob.id
        assert requests[0].user.username == "alice"

    def test_search_filters_on_other_user(self, graph, alice, bob, carol):
        for other in (bob, carol):
            graph.request_connection(alice.id, other.id)
            graph.accept_connection(alice.id, other.id)

        results = graph.get_connections(alice.id, search="CAR")
        assert [c.user.username for c in results] == ["carol"]

    def test_limit(self, graph, alice, bob, carol):
        for other in (bob, carol):
            graph.request_connection(other.id, alice.id)
            graph.accept_connection(other.id, alice.id)

        assert len(graph.get_connections(alice.id, limit=1)) == 1

    def test_cards_count_connections_and_active_posts(self, graph, db_session, alice, bob, carol):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)
        graph.request_connection(carol.id, bob.id)
        graph.accept_connection(carol.id, bob.id)
        db_session.add_all([
            Post(user_id=bob.id, title="one", content="x"),
            Post(user_id=bob.id, title="two", content="y", status=ContentStatus.ARCHIVED),
        ])
        db_session.commit()

        card = graph.build_user_cards([bob])[bob.id]
        assert card.connection_count == 2
        assert card.posts_count == 1
        assert graph.count_connections(bob.id) == 2

    def test_touching_and_connected_ids(self, graph, alice, bob, carol):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)
        graph.request_connection(carol.id, alice.id)

        assert graph.touching_user_ids(alice.id) == {bob.id, carol.id}
        assert graph.connected_user_ids(alice.id) == {bob.id}
