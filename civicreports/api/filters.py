"""Dashboard filter state API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from civicreports.core.deps import get_filter_sessions
from civicreports.schemas.dashboard import FilterStateResponse, FilterUpdate, ViewSwitch
from civicreports.services.filter_state import FilterSessions, FilterState

router = APIRouter(prefix="/filters", tags=["filters"])

# Applied in this order so the day is checked against the new month
_WINDOW_FIELDS = ("selected_year", "selected_month", "selected_day")
_FLAG_FIELDS = ("show_open", "show_in_progress", "show_closed")


def apply_filter_update(state: FilterState, data: FilterUpdate) -> None:
    """Apply ``data`` to ``state``; raises ``ValueError``.

    Year, month and day may be cleared with an explicit null. The other
    fields ignore nulls.
    """
    sent = data.model_fields_set
    for name in _WINDOW_FIELDS:
        if name in sent:
            setattr(state, name, getattr(data, name))
    if data.time_frame is not None:
        state.set_time_frame(data.time_frame)
    for name in _FLAG_FIELDS:
        value = getattr(data, name)
        if value is not None:
            setattr(state, name, value)
    if data.selected_categories is not None:
        state.selected_categories = data.selected_categories


def _update(sessions: FilterSessions, session_id: str, change) -> dict:
    try:
        return sessions.update(session_id, change).snapshot()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{session_id}", response_model=FilterStateResponse)
def get_filters(session_id: str, sessions: FilterSessions = Depends(get_filter_sessions)):
    return sessions.get(session_id).snapshot()


@router.patch("/{session_id}", response_model=FilterStateResponse)
def update_filters(
    session_id: str,
    data: FilterUpdate,
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    """Change the time window, status flags or category selection."""
    return _update(sessions, session_id, lambda state: apply_filter_update(state, data))


@router.post("/{session_id}/categories/{category}/toggle", response_model=FilterStateResponse)
def toggle_category(
    session_id: str,
    category: str,
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    """Select or deselect a category, as a click on a pie slice does."""
    return _update(sessions, session_id, lambda state: state.toggle_category(category))


@router.delete("/{session_id}/categories", response_model=FilterStateResponse)
def clear_categories(session_id: str, sessions: FilterSessions = Depends(get_filter_sessions)):
    return _update(sessions, session_id, FilterState.clear_categories)


@router.post("/{session_id}/view", response_model=FilterStateResponse)
def switch_view(
    session_id: str,
    data: ViewSwitch,
    sessions: FilterSessions = Depends(get_filter_sessions),
):
    return _update(sessions, session_id, lambda state: state.switch_view(data.view))


@router.delete("/{session_id}", response_model=FilterStateResponse)
def reset_filters(session_id: str, sessions: FilterSessions = Depends(get_filter_sessions)):
    """Back to the current month with everything visible."""
    return sessions.reset(session_id).snapshot()
