"""
Data models and schemas for prepMSCEIT

Contains Pydantic models for:
- Branches and assessment items
- Learner progress (UserStats)
- Profiles and identities
- Training catalogue
"""

from prepmsceit.models.branch import Branch, BRANCH_ORDER
from prepmsceit.models.question import Question, QuestionOption, QuestionType
from prepmsceit.models.stats import HistoryItem, UserStats, initial_stats
from prepmsceit.models.profile import Identity, Profile, ProfileStatus, UserRole
from prepmsceit.models.training import CatalogueEntry, TrainingModule, TRAINING_MODULES

__all__ = [
    # Branch
    "Branch",
    "BRANCH_ORDER",
    # Question
    "Question",
    "QuestionOption",
    "QuestionType",
    # Stats
    "HistoryItem",
    "UserStats",
    "initial_stats",
    # Profile
    "Identity",
    "Profile",
    "ProfileStatus",
    "UserRole",
    # Training
    "CatalogueEntry",
    "TrainingModule",
    "TRAINING_MODULES",
]
