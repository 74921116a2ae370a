from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Text


class User(BaseModel, Base):
    __tablename__ = "users"

    # Stored lower-cased; lookups lower-case their input too
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    avatar = Column(String(512), nullable=True)
    cover_image = Column(String(512), nullable=True)
    password_hash = Column(String(128), nullable=False)
    # The single refresh token currently accepted for this user; NULL = logged out
    refresh_token = Column(Text, nullable=True)

    def __repr__(self):
        return f"<User username={self.username}>"
