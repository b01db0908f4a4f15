from sqlalchemy import select
from sqlalchemy.orm import Session
from usedbooks.data.models.user import UserModel

class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, userid: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.userid == userid)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
