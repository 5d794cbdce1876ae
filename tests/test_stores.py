import tempfile
import unittest
from pathlib import Path

from quizcore.errors import ConflictError, ValidationError
from quizcore.results.schema import ResponseKey
from quizcore.storage import make_stores
from quizcore.storage.memory import MemoryResponseStore, MemorySessionStore
from quizcore.storage.parquet import ParquetResponseStore, ParquetSessionStore

from tests.helpers import StepClock


class SessionStoreContract:
    """Shared checks; subclasses provide make_session_store()."""

    def make_session_store(self):
        raise NotImplementedError

    def test_create_and_get(self) -> None:
        store = self.make_session_store()
        rec = store.create("s1", 4)
        self.assertEqual(rec.answered_questions, 0)
        self.assertIsNone(rec.completed_at)
        got = store.get("s1")
        self.assertEqual(got.session_id, "s1")
        self.assertEqual(got.total_questions, 4)
        self.assertEqual(got.started_at, rec.started_at)
        self.assertIsNone(store.get("nope"))

    def test_duplicate_create_conflicts(self) -> None:
        store = self.make_session_store()
        store.create("s1", 4)
        with self.assertRaises(ConflictError):
            store.create("s1", 4)

    def test_apply_update_merges_fields(self) -> None:
        store = self.make_session_store()
        rec = store.create("s1", 4)
        updated = store.apply_update("s1", answered_questions=2)
        self.assertEqual(updated.answered_questions, 2)
        self.assertIsNone(updated.completed_at)
        self.assertEqual(updated.started_at, rec.started_at)
        done = store.apply_update("s1", completed_at=rec.started_at)
        self.assertEqual(done.answered_questions, 2)
        self.assertEqual(store.get("s1").completed_at, rec.started_at)

    def test_apply_update_missing_returns_none(self) -> None:
        store = self.make_session_store()
        self.assertIsNone(store.apply_update("ghost", answered_questions=1))

    def test_apply_update_guards_invariants(self) -> None:
        store = self.make_session_store()
        rec = store.create("s1", 1)
        with self.assertRaises(ValidationError):
            store.apply_update("s1", answered_questions=2)
        with self.assertRaises(ValidationError):
            store.apply_update("s1", total_questions=5)
        store.apply_update("s1", completed_at=rec.started_at)
        with self.assertRaises(ValidationError):
            store.apply_update("s1", completed_at=None)
        self.assertEqual(store.get("s1").answered_questions, 0)


class ResponseStoreContract:
    def make_response_store(self):
        raise NotImplementedError

    def test_upsert_new_then_replace(self) -> None:
        store = self.make_response_store()
        first, was_new = store.upsert("s1", 1, "yes")
        self.assertTrue(was_new)
        second, was_new = store.upsert("s1", 1, "no")
        self.assertFalse(was_new)
        self.assertGreater(second.answered_at, first.answered_at)
        got = store.get("s1", 1)
        self.assertEqual(got.answer, "no")
        self.assertEqual(got.key, ResponseKey("s1", 1))
        self.assertEqual(len(store.list_by_session("s1")), 1)

    def test_get_absent_pair(self) -> None:
        store = self.make_response_store()
        store.upsert("s1", 1, "yes")
        self.assertIsNone(store.get("s1", 2))
        self.assertIsNone(store.get("s2", 1))

    def test_list_by_session_isolated(self) -> None:
        store = self.make_response_store()
        store.upsert("s1", 1, "yes")
        store.upsert("s1", 2, "true")
        store.upsert("s2", 1, "no")
        self.assertEqual(sorted(r.question_id for r in store.list_by_session("s1")), [1, 2])
        self.assertEqual([r.answer for r in store.list_by_session("s2")], ["no"])
        self.assertEqual(store.list_by_session("s3"), [])

    def test_composite_key_has_no_collisions(self) -> None:
        # "a-1" + 2 and "a" + 12 would collide under string concatenation.
        store = self.make_response_store()
        store.upsert("a-1", 2, "yes")
        store.upsert("a", 12, "no")
        self.assertEqual(store.get("a-1", 2).answer, "yes")
        self.assertEqual(store.get("a", 12).answer, "no")


class MemorySessionStoreTests(SessionStoreContract, unittest.TestCase):
    def make_session_store(self):
        return MemorySessionStore(clock=StepClock())


class MemoryResponseStoreTests(ResponseStoreContract, unittest.TestCase):
    def make_response_store(self):
        return MemoryResponseStore(clock=StepClock())


class ParquetSessionStoreTests(SessionStoreContract, unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def make_session_store(self):
        return ParquetSessionStore(Path(self._tmp.name), clock=StepClock())

    def test_survives_reopen(self) -> None:
        store = self.make_session_store()
        store.create("s1", 3)
        store.apply_update("s1", answered_questions=1)
        reopened = ParquetSessionStore(Path(self._tmp.name))
        got = reopened.get("s1")
        self.assertEqual(got.answered_questions, 1)
        self.assertEqual(got.total_questions, 3)
        self.assertEqual(got.started_at.utcoffset().total_seconds(), 0)


class ParquetResponseStoreTests(ResponseStoreContract, unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def make_response_store(self):
        return ParquetResponseStore(Path(self._tmp.name), clock=StepClock())


class MakeStoresTests(unittest.TestCase):
    def test_memory_default(self) -> None:
        sessions, responses = make_stores({})
        self.assertIsInstance(sessions, MemorySessionStore)
        self.assertIsInstance(responses, MemoryResponseStore)

    def test_parquet_backend(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            sessions, responses = make_stores({"storage": {"backend": "parquet", "data_dir": tmp}})
            self.assertIsInstance(sessions, ParquetSessionStore)
            self.assertIsInstance(responses, ParquetResponseStore)
            self.assertTrue(sessions.path.exists())
            self.assertTrue(responses.path.exists())


if __name__ == "__main__":
    unittest.main()
