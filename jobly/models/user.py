"""
User model for authentication.

Admin users may create, update, and delete companies and jobs; everyone
else has read-only access.
"""

from sqlalchemy import Column, String, Text, Boolean
from jobly.core.database import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    hashed_password = Column(Text, nullable=False)

    # User profile
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)  # Admin role for protected endpoints

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
