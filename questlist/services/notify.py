from typing import Callable, List


class ChangeNotifier:
    """Callbacks fired with the new state after a successful commit."""

    def __init__(self):
        self._subscribers: List[Callable] = []

    def subscribe(self, callback: Callable) -> Callable:
        self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Callable):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, state):
        for callback in list(self._subscribers):
            callback(state)
