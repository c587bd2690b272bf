from typing import Any, Dict, List, Tuple

HOME_SCREEN = "Home"


class Navigator:
    """Screen history stack, the subset of app navigation the client core needs."""

    def __init__(self, initial: str = HOME_SCREEN):
        self._stack: List[Tuple[str, Dict[str, Any]]] = [(initial, {})]

    @property
    def current(self) -> str:
        return self._stack[-1][0]

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self._stack[-1][1])

    @property
    def history(self) -> List[str]:
        return [screen for screen, _ in self._stack]

    def navigate(self, screen: str, **params: Any) -> None:
        # Navigating to a screen already in history returns to it
        for index, (name, _) in enumerate(self._stack):
            if name == screen:
                del self._stack[index + 1:]
                if params:
                    self._stack[-1] = (screen, params)
                return
        self._stack.append((screen, params))

    def can_go_back(self) -> bool:
        return len(self._stack) > 1

    def go_back(self) -> None:
        if self.can_go_back():
            self._stack.pop()
