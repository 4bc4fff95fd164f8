from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey
from app.database import Base

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_code = Column(String(20), nullable=False, unique=True)
    full_name = Column(String(100), nullable=False)
    position = Column(String(100), nullable=True)
    hire_date = Column(Date, nullable=True)
    # Membership is read at ranking time, never copied into score rows
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
