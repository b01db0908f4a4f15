from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from usedbooks.data.models.user import UserModel
from usedbooks.domain.errors import AlreadyExistsError
from usedbooks.repos.user_repo import UserRepo
from usedbooks.utils.settings import ADMIN_USER_ID
from usedbooks.utils.logging import get_logger

logger = get_logger(__name__)


def is_reserved_userid(userid: str) -> bool:
    return userid.strip().lower() == ADMIN_USER_ID.lower()


class UserService:
    """
    Konta uzytkownikow. Id admina jest zarezerwowane: nie da sie go
    zarejestrowac przez API, konto zaklada seed (ensure_admin).
    """

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, userid: str | None, password: str | None, confirm_password: str | None) -> UserModel:
        if not userid or not password or not confirm_password:
            raise ValueError("All fields are required.")

        if password != confirm_password:
            raise ValueError("Passwords do not match.")

        if is_reserved_userid(userid) or self.repo.get_user(userid):
            raise AlreadyExistsError("User already exists.")

        return self._create(userid, password)

    def ensure_admin(self, password: str) -> UserModel:
        """Zaklada konto admina, jesli jeszcze nie istnieje."""
        if not password:
            raise ValueError("Admin password is required.")

        existing = self.repo.get_user(ADMIN_USER_ID)
        if existing:
            return existing
        return self._create(ADMIN_USER_ID, password)

    def authenticate(self, userid: str | None, password: str | None) -> UserModel | None:
        if not userid or not password:
            raise ValueError("Both fields are required.")

        user = self.repo.get_user(userid)
        if not user or not check_password_hash(user.password_hash, password):
            logger.info(f"Failed login for {userid}")
            return None
        return user

    def _create(self, userid: str, password: str) -> UserModel:
        user = UserModel(userid=userid, password_hash=generate_password_hash(password))
        created = self.repo.create_user(user)
        logger.info(f"Registered user {created.userid}")
        return created
