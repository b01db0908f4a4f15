from sqlalchemy import Column, Integer, String
from usedbooks.data.database import Base

class UserModel(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    userid = Column(String(64), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
