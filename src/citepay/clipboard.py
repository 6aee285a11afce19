"""Clipboard collaborators. Copying is a fire-and-forget side effect."""
from abc import ABC, abstractmethod
from typing import List, Optional


class Clipboard(ABC):
    """Sink for citation text the reader wants to paste elsewhere."""

    @abstractmethod
    def copy(self, text: str) -> None:
        """Place ``text`` on the clipboard."""
        pass


class InMemoryClipboard(Clipboard):
    """Keeps copied text in memory, for terminals and tests."""

    def __init__(self):
        self.history: List[str] = []

    def copy(self, text: str) -> None:
        self.history.append(text)

    @property
    def last(self) -> Optional[str]:
        return self.history[-1] if self.history else None
