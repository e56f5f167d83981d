"""
User service - registration, login and profile lookups for readers.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..core.security import AccountRole, hash_password, verify_password, create_access_token
from ..exceptions import AlreadyExistsException, NotFoundException, InvalidCredentialsException
from ..articles.models import ArticleBookmark, Article
from .models import User
from .schemas import UserRegistration

# Set up logging
logger = logging.getLogger(__name__)


def register_user(db: Session, data: UserRegistration) -> User:
    """
    Create a reader account.

    Args:
        db: Database session
        data: Registration payload

    Returns:
        User: The new user

    Raises:
        AlreadyExistsException: If the email is already registered
    """
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        logger.warning(f"Registration rejected, email already in use: {email}")
        raise AlreadyExistsException("User already exists")

    user = User(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=email,
        password_hash=hash_password(data.password)
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise AlreadyExistsException("User already exists")
    db.refresh(user)

    logger.info(f"User registered: {user.id}")
    return user


def login_user(db: Session, email: str, password: str) -> dict:
    """
    Check credentials and issue a session token.

    Raises:
        NotFoundException: If no user has that email
        InvalidCredentialsException: If the password does not match
    """
    user = db.query(User).filter(User.email == email.lower()).first()
    if user is None:
        raise NotFoundException("User not found")
    if not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for user {user.id}")
        raise InvalidCredentialsException("Invalid credentials")

    token = create_access_token(user.id, AccountRole.USER)
    logger.info(f"User logged in: {user.id}")
    return {"user": user, "token": token}


def get_user_profile(db: Session, user: User) -> dict:
    """Return the user's data plus every article they bookmarked, newest bookmark first"""
    bookmarks = (
        db.query(ArticleBookmark)
        .options(
            selectinload(ArticleBookmark.article).selectinload(Article.doctor),
            selectinload(ArticleBookmark.article).selectinload(Article.likes),
            selectinload(ArticleBookmark.article).selectinload(Article.bookmarks),
        )
        .filter(ArticleBookmark.user_id == user.id)
        .order_by(ArticleBookmark.created_at.desc(), ArticleBookmark.id.desc())
        .all()
    )
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "created_at": user.created_at,
        "bookmarked_articles": [bookmark.article for bookmark in bookmarks],
    }
