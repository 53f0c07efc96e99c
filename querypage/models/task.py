from datetime import datetime
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from querypage.db.session import Base
from querypage.models.common import IntIdMixin, utcnow

class Task(Base, IntIdMixin):
    __tablename__ = "tasks"
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="NEW", server_default="NEW", index=True)
    created_on: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
