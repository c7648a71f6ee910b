"""
Test the suggestion engine

Tests:
- The user is never suggested to itself
- Users touching any connection row with the user are excluded
- Every suggestion carries the ADD state
- Search filter
"""
import pytest

from model.enums import ConnectionState
from src.social.connection_graph import ConnectionGraph
from src.social.suggestions import SuggestionEngine
from src.social.user_directory import UserDirectory


@pytest.fixture
def graph(db_session):
    return ConnectionGraph(db_session)


@pytest.fixture
def engine(db_session, graph):
    return SuggestionEngine(UserDirectory(db_session), graph)


def suggested_ids(engine, user_id, search=None):
    return [s.user.id for s in engine.get_suggestions(user_id, search=search)]


# ===================================================================
# Exclusion
# ===================================================================

class TestSuggestionExclusion:

    def test_empty_graph_suggests_everyone_else(self, engine, alice, bob, carol):
        assert suggested_ids(engine, alice.id) == [bob.id, carol.id]

    def test_never_suggests_self(self, engine, alice):
        assert suggested_ids(engine, alice.id) == []

    def test_excludes_outgoing_pending(self, engine, graph, alice, bob, carol):
        graph.request_connection(alice.id, bob.id)
        assert suggested_ids(engine, alice.id) == [carol.id]

    def test_excludes_incoming_pending(self, engine, graph, alice, bob, carol):
        graph.request_connection(bob.id, alice.id)
        assert suggested_ids(engine, alice.id) == [carol.id]

    def test_excludes_accepted(self, engine, graph, alice, bob, carol):
        graph.request_connection(alice.id, bob.id)
        graph.accept_connection(alice.id, bob.id)

        assert suggested_ids(engine, alice.id) == [carol.id]
        assert suggested_ids(engine, bob.id) == [carol.id]

    def test_other_users_rows_do_not_exclude(self, engine, graph, alice, bob, carol):
        graph.request_connection(bob.id, carol.id)
        assert suggested_ids(engine, alice.id) == [bob.id, carol.id]

    def test_removed_connection_is_suggested_again(self, engine, graph, alice, bob):
        graph.request_connection(alice.id, bob.id)
        graph.remove_connection(alice.id, bob.id)
        assert suggested_ids(engine, alice.id) == [bob.id]


# ===================================================================
# Result shape
# ===================================================================

class TestSuggestionResults:

    def test_every_suggestion_is_add(self, engine, graph, make_user, alice):
        others = [make_user(name) for name in ("dave", "erin", "frank", "grace")]
        graph.request_connection(alice.id, others[0].id)
        graph.request_connection(others[1].id, alice.id)
        graph.accept_connection(others[1].id, alice.id)

        suggestions = engine.get_suggestions(alice.id)

        assert {s.user.id for s in suggestions} == {others[2].id, others[3].id}
        assert all(s.connection_state == ConnectionState.ADD for s in suggestions)

    def test_cards_carry_counts(self, engine, graph, alice, bob, carol):
        graph.request_connection(bob.id, carol.id)
        graph.accept_connection(bob.id, carol.id)

        cards = {s.user.id: s.user for s in engine.get_suggestions(alice.id)}
        assert cards[bob.id].connection_count == 1
        assert cards[bob.id].posts_count == 0

    def test_search(self, engine, alice, bob, carol):
        assert suggested_ids(engine, alice.id, search="bo") == [bob.id]
        assert suggested_ids(engine, alice.id, search="Tester") == [bob.id, carol.id]
