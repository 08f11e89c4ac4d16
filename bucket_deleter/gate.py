"""Two-step interactive confirmation before a bucket is destroyed."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class ConfirmationGate:
    """
    Asks the operator twice before a bucket may be emptied and deleted.

    Both answers must be ``y`` (any case). Anything else, including an empty
    line or a failed read, declines. Each bucket is asked independently.
    """

    def __init__(self, ask: Callable[[str], str] = input) -> None:
        self._ask = ask

    @staticmethod
    def questions(bucket_name: str) -> tuple[str, str]:
        return (
            "Do you want to empty and delete this bucket?",
            f"Are you sure you want to delete bucket {bucket_name} and all its contents?",
        )

    def confirm(self, prompt: str) -> bool:
        """
        Get user confirmation for a destructive operation.

        Args:
            prompt: The confirmation prompt to display.

        Returns:
            True if user confirms, False otherwise.
        """
        try:
            ans = self._ask(f"{prompt} (y/N): ")
        except (EOFError, OSError) as e:
            logger.debug(f"Could not read confirmation, treating as no: {e!r}")
            return False
        return ans.strip().lower() == "y"

    def allows(self, bucket_name: str) -> bool:
        """Return True only if every question is answered yes."""
        for prompt in self.questions(bucket_name):
            if not self.confirm(prompt):
                logger.info(f"Deletion of bucket {bucket_name} canceled.")
                return False
        return True
