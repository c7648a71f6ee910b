# routes/connections.py
"""
API endpoints for the connection graph.
Users request, accept and remove connections and browse suggestions.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from config.dependencies import get_directory, get_graph, get_privacy, get_suggestions
from config.security import ensure_self_or_admin, get_current_user
from config.settings import DEFAULT_CONNECTIONS_LIMIT
from model.user import Users
from schema.connection import ConnectionOut, ConnectionRequestOut, ConnectionStateOut, SuggestionOut
from src.social.connection_graph import ConnectionGraph
from src.social.privacy import PrivacyGate
from src.social.suggestions import SuggestionEngine
from src.social.user_directory import UserDirectory

router = APIRouter(prefix="/v1/connections", tags=["Connections"])


# ============================================================================
# Lists
# ============================================================================

@router.get("/{user_id}", response_model=List[ConnectionOut])
def list_connections(
    user_id: int,
    search: Optional[str] = None,
    limit: int = Query(DEFAULT_CONNECTIONS_LIMIT, ge=1),
    current_user: Users = Depends(get_current_user),
    graph: ConnectionGraph = Depends(get_graph),
    privacy: PrivacyGate = Depends(get_privacy),
):
    """
    Accepted connections of a user.

    - Empty when the owner's connections privacy hides them from the caller
    """
    if not privacy.can_view_connections(user_id, current_user.id):
        return []
    return graph.get_connections(user_id, search=search, limit=limit)


@router.get("/{user_id}/requests", response_model=List[ConnectionRequestOut])
def list_requests(
    user_id: int,
    current_user: Users = Depends(get_current_user),
    graph: ConnectionGraph = Depends(get_graph),
):
    ensure_self_or_admin(current_user, user_id)
    return graph.get_connection_requests(user_id)


@router.get("/{user_id}/state/{other_id}", response_model=ConnectionStateOut)
def connection_state(
    user_id: int,
    other_id: int,
    current_user: Users = Depends(get_current_user),
    graph: ConnectionGraph = Depends(get_graph),
    directory: UserDirectory = Depends(get_directory),
):
    directory.get_user(user_id)
    directory.get_user(other_id)
    return ConnectionStateOut(
        state=graph.get_connection_state(user_id, other_id),
        user_id=user_id,
        other_id=other_id,
    )


@router.get("/{user_id}/suggestions", response_model=List[SuggestionOut])
def suggestions(
    user_id: int,
    search: Optional[str] = None,
    current_user: Users = Depends(get_current_user),
    engine: SuggestionEngine = Depends(get_suggestions),
):
    ensure_self_or_admin(current_user, user_id)
    return engine.get_suggestions(user_id, search=search)


# ============================================================================
# Mutations (caller must be `user_id`)
# ============================================================================

@router.post("/{user_id}/request/{other_id}", response_model=ConnectionStateOut, status_code=status.HTTP_201_CREATED)
def request_connection(
    user_id: int,
    other_id: int,
    current_user: Users = Depends(get_current_user),
    graph: ConnectionGraph = Depends(get_graph),
):
    ensure_self_or_admin(current_user, user_id, allow_admin=False)
    graph.request_connection(user_id, other_id)
    return ConnectionStateOut(state=graph.get_connection_state(user_id, other_id), user_id=user_id, other_id=other_id)


@router.put("/{user_id}/accept/{other_id}", response_model=ConnectionStateOut)
def accept_connection(
    user_id: int,
    other_id: int,
    current_user: Users = Depends(get_current_user),
    graph: ConnectionGraph = Depends(get_graph),
):
    """Accept the request `other_id` sent to `user_id`."""
    ensure_self_or_admin(current_user, user_id, allow_admin=False)
    graph.accept_connection(follower_id=other_id, following_id=user_id)
    return ConnectionStateOut(state=graph.get_connection_state(user_id, other_id), user_id=user_id, other_id=other_id)


@router.delete("/{user_id}/disconnect/{other_id}", status_code=status.HTTP_204_NO_CONTENT)
def disconnect(
    user_id: int,
    other_id: int,
    current_user: Users = Depends(get_current_user),
    graph: ConnectionGraph = Depends(get_graph),
):
    """Unfollow, cancel a sent request or reject a received one."""
    ensure_self_or_admin(current_user, user_id, allow_admin=False)
    graph.remove_connection(user_id, other_id)
