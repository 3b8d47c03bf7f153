# app/models/employee.py
from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid

from app.models.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(100), nullable=False)
    surname = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)

    business = relationship("Business", back_populates="employees")
    schedule = relationship(
        "DaySchedule",
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="DaySchedule.day_of_week",
    )

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    def __repr__(self):
        return f"<Employee(id={self.id}, business_id={self.business_id})>"
