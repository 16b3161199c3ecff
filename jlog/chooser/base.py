from abc import ABC, abstractmethod


class Chooser(ABC):
    """Base interface for interactive line pickers.

    Implementations: FzfChooser (default), PromptChooser (no external tool).
    """

    @abstractmethod
    def offer(self, items):
        """Let the user pick one of items (strings).

        Returns the chosen line, or None when nothing was selected.
        """
        pass
