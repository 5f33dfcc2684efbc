"""
Emotional-intelligence branch taxonomy for prepMSCEIT

The four MSCEIT competency branches. Declaration order is the canonical
branch order used wherever branches are iterated or compared.
"""

from enum import Enum


class Branch(str, Enum):
    """Emotional-intelligence competency branches."""

    PERCEIVING = "Perceiving Emotions"
    USING = "Using Emotions"
    UNDERSTANDING = "Understanding Emotions"
    MANAGING = "Managing Emotions"

    @property
    def short_name(self) -> str:
        """Branch name without the trailing 'Emotions'."""
        return self.value.replace(" Emotions", "")

    @property
    def db_code(self) -> str:
        """Upper-case code used by the practice test tables."""
        return self.name

    @classmethod
    def parse(cls, value: str) -> "Branch":
        """
        Resolve a branch from its value, short name or database code.

        Raises:
            ValueError: If the value names no branch
        """
        normalized = value.strip().lower()
        for branch in cls:
            if normalized in (
                branch.value.lower(),
                branch.short_name.lower(),
                branch.db_code.lower(),
            ):
                return branch
        raise ValueError(f"Unknown branch: {value}")


BRANCH_ORDER: tuple[Branch, ...] = tuple(Branch)


BRANCH_GUIDANCE: dict[Branch, str] = {
    Branch.PERCEIVING: (
        'Use Type "Image" (a placeholder image is supplied, just describe '
        "the emotion to look for)."
    ),
    Branch.USING: "Ask how a specific mood aids a specific cognitive task.",
    Branch.UNDERSTANDING: "Focus on emotional blends, transitions, and definitions.",
    Branch.MANAGING: (
        "Present a social or personal scenario and ask for the most "
        "effective strategy."
    ),
}
