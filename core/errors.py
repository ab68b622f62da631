from __future__ import annotations


class ScenarioError(ValueError):
    """Raised when a scenario cannot be projected at all (as opposed to a bad item)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
