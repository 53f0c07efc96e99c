from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from querypage.db.session import Base, SessionLocal, engine
from querypage.models.task import Task

DEMO_STATUSES = ("NEW", "IN_PROGRESS", "DONE")


def seed_tasks(db: Session, count: int = 50) -> int:
    """Insert ``count`` demo tasks named ``task-NNN`` unless already present."""
    created = 0
    started = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for index in range(1, count + 1):
        name = f"task-{index:03d}"
        if db.query(Task).filter(Task.name == name).first() is not None:
            continue
        db.add(
            Task(
                name=name,
                status=DEMO_STATUSES[index % len(DEMO_STATUSES)],
                created_on=started + timedelta(hours=index),
            )
        )
        created += 1
    db.commit()
    return created


def main() -> None:
    Base.metadata.create_all(bind=engine, tables=[Task.__table__])
    db = SessionLocal()
    try:
        created = seed_tasks(db)
        total = db.query(Task).count()
    finally:
        db.close()
    print(f"tasks seed done: created={created}, total={total}")


if __name__ == "__main__":
    main()
