"""History stack for state navigation."""
from __future__ import annotations

from typing import Hashable


class Navigator:
    """Stack-based navigation with breadcrumbs.

    - Push on enter: moving forward pushes to the stack
    - Pop on Back: returns to the previous state
    - Replace: swaps the top without growing history (pending -> results)
    - Reset on Home: clears the stack to the root
    """

    # State value to human-readable label mapping
    SCREEN_LABELS = {
        "awaiting_input": "Search",
        "search_pending": "Searching",
        "showing_result_list": "Results",
        "showing_result_detail": "Question",
        "displaying_all_comments": "Comments",
        "displaying_help_screen": "Help",
    }

    def __init__(self, root: Hashable):
        """Initialize with `root` as the starting state."""
        self.root = root
        self.stack: list[Hashable] = [root]

    def push(self, screen: Hashable) -> None:
        self.stack.append(screen)

    def pop(self) -> Hashable | None:
        """Go back to the previous state.

        Returns:
            The state that was popped, or None if at root
        """
        if len(self.stack) > 1:
            return self.stack.pop()
        return None

    def replace(self, screen: Hashable) -> None:
        self.stack[-1] = screen

    def home(self) -> None:
        self.stack = [self.root]

    def current(self):
        return self.stack[-1]

    def previous(self):
        """The state Back would return to, or None at root."""
        if len(self.stack) > 1:
            return self.stack[-2]
        return None

    def breadcrumbs(self) -> str:
        """Generate breadcrumb navigation string.

        Returns:
            Breadcrumb path like "Search > Results > Question"
        """
        labels = [self.label(screen) for screen in self.stack]
        return " > ".join(labels)

    def label(self, screen: Hashable) -> str:
        key = getattr(screen, "value", screen)
        return self.SCREEN_LABELS.get(key, str(key))

    def depth(self) -> int:
        return len(self.stack)
