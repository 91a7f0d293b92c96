from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=True)

    addresses = relationship("AddressModel", back_populates="user")
