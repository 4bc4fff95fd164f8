from sqlalchemy import Column, Integer, String, Text, Float, Boolean
from app.database import Base

class Criterion(Base):
    __tablename__ = "criteria"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=False, default="Other")
    weight = Column(Float, nullable=False)  # percentage points, active set should total 100
    is_active = Column(Boolean, default=True, nullable=False)
