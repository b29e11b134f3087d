from sqlalchemy import Column, Index, Integer, String

from registration.config.db_session import Base


class User(Base):
    __tablename__ = "user"
    __table_args__ = (
        Index("idx_user_age", "age"),
        Index("idx_user_name", "name"),
    )

    user_id = Column("userId", Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    age = Column(Integer, nullable=False)

    def to_dict(self) -> dict:
        return {"userId": self.user_id, "name": self.name, "email": self.email, "age": self.age}

    def __repr__(self) -> str:
        return f"<User userId={self.user_id} name={self.name!r}>"
