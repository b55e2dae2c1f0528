from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    message = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    role = Column(String, nullable=False, default="admin")
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_dict(self) -> dict:
        # Never expose the password hash
        return {"id": self.id, "name": self.name, "role": self.role}
