"""
Tests for the Query builder and in-process query evaluation.
"""
import pytest

from docvault import Query, QueryError
from docvault.persistence import StoredDocument

PEOPLE = {
    "a": {"name": "Ann", "age": 31, "tags": ["x", "y"], "details": {"team": "red"}},
    "b": {"name": "Bob", "age": 25, "tags": ["y"], "details": {"team": "blue"}},
    "c": {"name": "Cid", "age": 40, "tags": [], "details": {"team": "red"}},
    "d": {"name": "Dee", "tags": ["z"]},
    "e": {"name": "Eve", "age": "unknown", "tags": ["x"]},
}


@pytest.fixture
async def people(store):
    for doc_id, data in PEOPLE.items():
        await store.set("people", doc_id, data)
    return store


def ids(results):
    return [doc["id"] for doc in results]


class TestWhere:

    @pytest.mark.parametrize("field, op, value, expected", [
        ("age", "==", 31, ["a"]),
        ("age", "!=", 31, ["b", "c", "e"]),
        ("age", "<", 31, ["b"]),
        ("age", "<=", 31, ["a", "b"]),
        ("age", ">", 30, ["a", "c"]),
        ("age", ">=", 40, ["c"]),
        ("tags", "array-contains", "x", ["a", "e"]),
        ("tags", "array-contains-any", ["y", "z"], ["a", "b", "d"]),
        ("name", "in", ["Ann", "Dee"], ["a", "d"]),
        ("name", "not-in", ["Ann", "Dee"], ["b", "c", "e"]),
        ("details.team", "==", "red", ["a", "c"]),
    ])
    async def test_operators(self, people, field, op, value, expected):
        results = await Query("people", people).where(field, op, value).get()

        assert ids(results) == expected

    async def test_conditions_combine(self, people):
        results = await Query("people", people).where("details.team", "==", "red").where("age", ">", 35).get()

        assert ids(results) == ["c"]

    def test_invalid_operator(self, store):
        with pytest.raises(QueryError):
            Query("people", store).where("age", "~=", 1)

    def test_list_operator_needs_list(self, store):
        with pytest.raises(QueryError):
            Query("people", store).where("age", "in", 1)


class TestOrderingAndPaging:

    async def test_order_excludes_documents_without_the_field(self, people):
        results = await Query("people", people).order_by("age").get()

        # numbers sort before strings
        assert ids(results) == ["b", "a", "c", "e"]

    async def test_descending(self, people):
        results = await Query("people", people).where("age", ">", 0).order_by("age", "desc").get()

        assert ids(results) == ["c", "a", "b"]

    async def test_limit_offset(self, people):
        results = await Query("people", people).order_by("name").offset(1).limit(2).get()

        assert ids(results) == ["b", "c"]

    async def test_limit_to_last(self, people):
        results = await Query("people", people).order_by("name").limit_to_last(2).get()

        assert ids(results) == ["d", "e"]

    async def test_limit_to_last_requires_order(self, people):
        with pytest.raises(QueryError):
            await Query("people", people).limit_to_last(2).get()

    async def test_cursors(self, people):
        start = await people.get("people", "a")
        end = await people.get("people", "d")

        results = await Query("people", people).order_by("name").start_after(start).end_before(end).get()

        assert ids(results) == ["b", "c"]

    def test_cursor_must_exist(self, store):
        with pytest.raises(QueryError):
            Query("people", store).start_after(StoredDocument(id="x", exists=False))

    async def test_cursor_without_order_field_is_rejected(self, people):
        dee = await people.get("people", "d")

        with pytest.raises(QueryError):
            Query("people", people).order_by("age").start_after(dee)
        with pytest.raises(QueryError):
            Query("people", people).order_by("age").end_before(dee)

    async def test_cursor_checked_against_later_order_by(self, people):
        dee = await people.get("people", "d")
        query = Query("people", people).start_after(dee).order_by("age")

        with pytest.raises(QueryError):
            await query.get()
        with pytest.raises(QueryError):
            await query.count()

    def test_invalid_direction_and_limits(self, store):
        query = Query("people", store)

        with pytest.raises(QueryError):
            query.order_by("name", "up")
        with pytest.raises(QueryError):
            query.limit(-1)
        with pytest.raises(QueryError):
            query.offset(1.5)


class TestResults:

    async def test_skip_formatting(self, people):
        results = await Query("people", people).where("name", "==", "Ann").get(skip_formatting=True)

        assert results == [StoredDocument(id="a", data=PEOPLE["a"])]

    async def test_count_ignores_limit(self, people):
        query = Query("people", people).where("tags", "array-contains", "x").limit(1)

        assert await query.count() == 2
        assert len(await query.get()) == 1

    async def test_empty_collection(self, store):
        assert await Query("nobody", store).get() == []
        assert await Query("nobody", store).count() == 0
