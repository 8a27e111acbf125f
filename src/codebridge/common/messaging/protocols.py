from typing import Protocol


class Renderer(Protocol):
    """
    Presents a fully resolved message to the user.
    """

    def render(self, message: str, level: str) -> None:
        """
        Args:
            message: The formatted text to display.
            level: One of "debug", "info", "success", "warning", "error".
        """
        ...
