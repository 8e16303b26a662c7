"""
Store owning the current ViewState.

State only changes through ``dispatch``. Each dispatch reduces and swaps the
state under a lock, so readers always see a complete snapshot.
"""

import threading
from typing import Callable, List, Optional

from loguru import logger

from submission_portal.state.actions import Action
from submission_portal.state.reducer import reduce
from submission_portal.state.view_state import ViewState

Listener = Callable[[Action, ViewState], None]


class SubmissionStore:
    """Holds the page state and notifies listeners after every dispatch."""

    def __init__(self, initial_state: Optional[ViewState] = None):
        self._state = initial_state or ViewState()
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> ViewState:
        with self._lock:
            return self._state

    def dispatch(self, action: Action) -> ViewState:
        """
        Reduce ``action`` into the current state.

        Args:
            action: Action to apply

        Returns:
            ViewState: The state after the action
        """
        with self._lock:
            self._state = reduce(self._state, action)
            new_state = self._state
        logger.debug(f"Dispatched {getattr(action, 'kind', type(action).__name__)}")
        for listener in list(self._listeners):
            listener(action, new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with (action, new_state) after each dispatch.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
