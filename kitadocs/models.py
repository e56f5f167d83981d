"""
Imports every model so ``Base.metadata`` knows all tables.

Used by ``create_all`` at startup and by Alembic autogeneration.
"""
from .database import Base
from .users.models import User
from .doctors.models import Doctor, DoctorDocument, VerificationStatus
from .admins.models import Admin, AdminRole
from .articles.models import Article, ArticleCategory, ArticleLike, ArticleBookmark
from .forms.models import Form, FormQuestion, FormStatus, QuestionStatus
from .notifications.models import NotificationJob, NotificationStatus

__all__ = [
    "Base",
    "User",
    "Doctor", "DoctorDocument", "VerificationStatus",
    "Admin", "AdminRole",
    "Article", "ArticleCategory", "ArticleLike", "ArticleBookmark",
    "Form", "FormQuestion", "FormStatus", "QuestionStatus",
    "NotificationJob", "NotificationStatus",
]
