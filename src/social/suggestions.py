"""
Suggestion Engine

Users a given user might want to connect with.
"""
import logging
from typing import List, Optional

from model.enums import ConnectionState
from schema.connection import SuggestionOut
from src.social.connection_graph import ConnectionGraph
from src.social.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class SuggestionEngine:

    def __init__(self, directory: UserDirectory, graph: ConnectionGraph):
        self.directory = directory
        self.graph = graph

    def get_suggestions(self, user_id: int, search: Optional[str] = None) -> List[SuggestionOut]:
        """
        Candidates not yet linked to `user_id`.

        Excludes the user itself and everyone touching a connection row with
        the user, pending or accepted, in either direction. Every suggestion
        therefore carries the ADD state.
        """
        excluded = self.graph.touching_user_ids(user_id)
        excluded.add(user_id)

        candidates = [
            user for user in self.directory.search_users(search)
            if user.id not in excluded
        ]
        cards = self.graph.build_user_cards(candidates)

        suggestions = []
        for user in candidates:
            # No row exists for a surviving candidate; anything but ADD means
            # the exclusion set above is incomplete.
            state = self.graph.get_connection_state(user_id, user.id)
            if state != ConnectionState.ADD:
                logger.error(f"Suggestion {user.id} for user {user_id} has state {state.value}; skipping")
                continue
            suggestions.append(SuggestionOut(user=cards[user.id], connection_state=state))

        return suggestions
