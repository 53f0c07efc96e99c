import unittest
from datetime import datetime, timedelta

from sqlalchemy import create_engine, event, select
from sqlalchemy.orm import Session

from querypage.models.task import Task
from querypage.schemas.paging import PageRequest, SortDirection, SortInstruction
from querypage.scripts.seed_tasks import seed_tasks
from querypage.services.errors import UnknownSortFieldError
from querypage.services.page_augmenter import SchemaDescriptor
from querypage.services.page_fetch import fetch_page, fetch_select_page

TASK_SCHEMA = SchemaDescriptor.from_model(Task)


def _page(page_index, page_size, *sort):
    return PageRequest(
        page_index=page_index,
        page_size=page_size,
        sort=[SortInstruction(field=name, direction=direction) for name, direction in sort],
    )


class FetchPageTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        Task.__table__.create(bind=cls.engine)
        started = datetime(2026, 5, 1, 9, 0, 0)
        with Session(cls.engine) as session:
            session.add_all(
                [
                    Task(id=index, name=f"task-{index:02d}", status="NEW" if index % 2 else "DONE",
                         created_on=started + timedelta(minutes=index))
                    for index in range(1, 24)
                ]
            )
            session.commit()

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def test_first_page_with_totals(self):
        with Session(self.engine) as session:
            result = fetch_page(
                TASK_SCHEMA,
                session.query(Task),
                _page(0, 10, ("created_on", SortDirection.DESCENDING)),
                serializer=lambda row: row.id,
            )
        self.assertEqual(result.rows, list(range(23, 13, -1)))
        self.assertEqual(result.total, 23)
        self.assertEqual(result.total_pages, 3)
        self.assertTrue(result.has_next)
        self.assertEqual(result.sort[0].field, "created_on")

    def test_last_page_has_no_next(self):
        with Session(self.engine) as session:
            result = fetch_page(TASK_SCHEMA, session.query(Task), _page(2, 10, ("id", SortDirection.ASCENDING)))
            ids = [row.id for row in result.rows]
        self.assertEqual(ids, [21, 22, 23])
        self.assertFalse(result.has_next)

    def test_total_ignores_paging_but_keeps_filters(self):
        with Session(self.engine) as session:
            query = session.query(Task).filter(Task.status == "DONE")
            result = fetch_page(TASK_SCHEMA, query, _page(1, 4, ("name", SortDirection.ASCENDING)),
                                serializer=lambda row: row.name)
        self.assertEqual(result.total, 11)
        self.assertEqual(result.rows, ["task-10", "task-12", "task-14", "task-16"])

    def test_zero_page_size(self):
        with Session(self.engine) as session:
            result = fetch_page(TASK_SCHEMA, session.query(Task), _page(3, 0))
        self.assertEqual(result.rows, [])
        self.assertEqual(result.total, 23)
        self.assertEqual(result.total_pages, 0)
        self.assertFalse(result.has_next)

    def test_unknown_sort_field_runs_no_sql(self):
        statements = []

        def _record(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(self.engine, "before_cursor_execute", _record)
        try:
            with Session(self.engine) as session:
                with self.assertRaises(UnknownSortFieldError):
                    fetch_page(TASK_SCHEMA, session.query(Task), _page(0, 10, ("priority", SortDirection.ASCENDING)))
        finally:
            event.remove(self.engine, "before_cursor_execute", _record)
        self.assertEqual(statements, [])

    def test_select_page_as_mappings(self):
        stmt = select(Task.id, Task.name).where(Task.id <= 12)
        schema = SchemaDescriptor.from_model(Task, only=["id", "name"])
        with Session(self.engine) as session:
            result = fetch_select_page(session, schema, stmt, _page(1, 5, ("id", SortDirection.DESCENDING)))
        self.assertEqual(result.total, 12)
        self.assertEqual([row["id"] for row in result.rows], [7, 6, 5, 4, 3])
        self.assertEqual(result.rows[0]["name"], "task-07")

    def test_select_page_as_scalars(self):
        with Session(self.engine) as session:
            result = fetch_select_page(
                session,
                TASK_SCHEMA,
                select(Task),
                _page(0, 3, ("status", SortDirection.ASCENDING), ("id", SortDirection.DESCENDING)),
                scalars=True,
                serializer=lambda row: (row.status, row.id),
            )
        self.assertEqual(result.rows, [("DONE", 22), ("DONE", 20), ("DONE", 18)])
        self.assertEqual(result.total_pages, 8)


class SeedTasksTests(unittest.TestCase):
    def test_seed_is_idempotent(self):
        engine = create_engine("sqlite+pysqlite:///:memory:")
        Task.__table__.create(bind=engine)
        try:
            with Session(engine) as session:
                self.assertEqual(seed_tasks(session, count=12), 12)
                self.assertEqual(seed_tasks(session, count=12), 0)
                self.assertEqual(session.query(Task).count(), 12)
        finally:
            engine.dispose()


if __name__ == "__main__":
    unittest.main()
