from typing import Protocol


class INavigator(Protocol):
    """Moves the caller away from a view it may not see."""

    def redirect_to_login(self) -> None: ...
