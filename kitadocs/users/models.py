"""
User Model - Readers of the platform who like and bookmark articles.
"""
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    """
    User Model - Stores reader accounts

    Fields:
    - id: Primary key
    - first_name / last_name: User's name
    - email: Unique login email
    - password_hash: bcrypt hash of the user's password
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    likes = relationship("ArticleLike", back_populates="user", cascade="all, delete-orphan")
    bookmarks = relationship(
        "ArticleBookmark",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="ArticleBookmark.created_at.desc()"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
