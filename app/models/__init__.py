"""
AwareGuard Models Package
"""

from app.models.user import User, UserRole, Payment, PaymentStatus
from app.models.quiz import QuizQuestion, QuestionType, DifficultyLevel
from app.models.progress import UserProgress, ModuleProgress, QuizAttempt
from app.models.content import Story, StoryComment, Contact, ContactStatus, InquiryType, Lead

__all__ = [
    "User", "UserRole", "Payment", "PaymentStatus",
    "QuizQuestion", "QuestionType", "DifficultyLevel",
    "UserProgress", "ModuleProgress", "QuizAttempt",
    "Story", "StoryComment", "Contact", "ContactStatus", "InquiryType", "Lead",
]
