from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, DateTime
from studyflow.database import Base
from studyflow.models.enums import TaskCategory, TaskPriority, enum_column
from studyflow.utils.dates import utcnow


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(enum_column(TaskCategory), nullable=False, default=TaskCategory.general)
    priority = Column(enum_column(TaskPriority), nullable=False, default=TaskPriority.medium)
    estimated_minutes = Column(Integer, nullable=False, default=30)
    completed = Column(Boolean, nullable=False, default=False)
    # set exactly when completed is true; kept in sync by the storage layer
    completed_at = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)


class TaskCollection(Base):
    __tablename__ = "task_collections"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    topic = Column(String, nullable=True)
    generated_at = Column(DateTime(timezone=True), default=utcnow)
