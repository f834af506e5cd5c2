# Models module
from .user import User, UserRole
from .assessment import Assessment
from .assessment_link import AssessmentLink
from .assessment_result import AssessmentResult
from .question_bank import QuestionBankItem
from .audit_event import AuditEvent

__all__ = [
    "User",
    "UserRole",
    "Assessment",
    "AssessmentLink",
    "AssessmentResult",
    "QuestionBankItem",
    "AuditEvent"
]
