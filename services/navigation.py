"""
services/navigation.py – Page / search / category state machine.

Rules
-----
  search starts    : remember the current page, jump to page 0
  search continues : page left alone
  search cleared   : return to the remembered page
  category change  : always page 0; search state untouched
  page change      : taken as-is, no clamping
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class ViewState:
    search_query: str = ""
    selected_category: Optional[str] = None
    current_page: int = 0
    previous_page_before_search: int = 0
    is_searching: bool = False


class NavigationController:
    """Owns the ViewState and applies user intents to it."""

    def __init__(self, state: Optional[ViewState] = None) -> None:
        self._state = state or ViewState()

    @property
    def state(self) -> ViewState:
        return self._state

    def on_search_changed(self, query: str) -> ViewState:
        state = self._state
        if query:
            if not state.is_searching:
                state = replace(
                    state,
                    previous_page_before_search=state.current_page,
                    current_page=0,
                    is_searching=True,
                )
        else:
            state = replace(
                state,
                current_page=state.previous_page_before_search,
                is_searching=False,
            )
        self._state = replace(state, search_query=query)
        return self._state

    def on_category_changed(self, category: Optional[str]) -> ViewState:
        self._state = replace(self._state, selected_category=category, current_page=0)
        return self._state

    def on_page_changed(self, page: int) -> ViewState:
        self._state = replace(self._state, current_page=page)
        return self._state
