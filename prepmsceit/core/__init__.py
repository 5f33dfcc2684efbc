"""
Core business logic modules for prepMSCEIT

Contains:
- Scoring: folding assessment results into learner stats
- Progress: local/remote persistence of learner state
- Question Generator / Parser: AI-backed item generation and import
- Invitations: admin invitations with fallback delivery
- Onboarding, Profiles, Lead Capture, Training, Analytics
"""

from prepmsceit.core.scoring import apply_assessment_result
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError
from prepmsceit.core.mailer import Mailer, MailerError
from prepmsceit.core.progress import LearnerSession, SessionRegistry
from prepmsceit.core.question_generator import QuestionGenerator
from prepmsceit.core.question_parser import QuestionParser, QuestionParsingError
from prepmsceit.core.invitations import InviteService
from prepmsceit.core.onboarding import OnboardingFlow
from prepmsceit.core.profiles import ProfileService
from prepmsceit.core.lead_capture import LeadCaptureClient, LeadSubmissionError

__all__ = [
    "apply_assessment_result",
    "SupabaseClient",
    "SupabaseError",
    "Mailer",
    "MailerError",
    "LearnerSession",
    "SessionRegistry",
    "QuestionGenerator",
    "QuestionParser",
    "QuestionParsingError",
    "InviteService",
    "OnboardingFlow",
    "ProfileService",
    "LeadCaptureClient",
    "LeadSubmissionError",
]
