from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

LocationListener = Callable[[str], None]


@dataclass
class Location:
    """Address bar stand-in: current path and query plus navigation history."""

    pathname: str = "/"
    search: str = ""
    history: list[str] = field(default_factory=list)
    _listeners: list[LocationListener] = field(default_factory=list, repr=False)

    @property
    def href(self) -> str:
        return f"{self.pathname}{self.search}"

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def navigate(self, target: str) -> None:
        path, sep, query = target.partition("?")
        self.history.append(self.href)
        self.pathname = path or self.pathname
        self.search = f"?{query}" if sep and query else ""
        self._notify()

    def back(self) -> bool:
        if not self.history:
            return False
        previous = self.history.pop()
        path, sep, query = previous.partition("?")
        self.pathname = path or self.pathname
        self.search = f"?{query}" if sep and query else ""
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.search)
