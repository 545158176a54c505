"""
Tests for Model against the in-memory store.
"""
import pytest

from docvault import (
    DocumentNotFoundError,
    FieldRequiredError,
    FieldTypeError,
    Model,
    Schema,
    SchemaMethods,
)
from docvault.persistence import StoredDocument


@pytest.fixture
def users(user_schema, store):
    return Model("users", user_schema, store)


class TestCreate:

    async def test_create_validates_and_formats(self, users):
        created = await users.create({"name": " Ann ", "extra": True})

        assert set(created) == {"id", "name", "tags"}
        assert created["name"] == "Ann"
        assert created["tags"] == []

    async def test_create_with_id_and_find(self, users):
        created = await users.create({"name": "Ann"}, id="ann")

        assert created["id"] == "ann"
        assert await users.find_by_id("ann") == {"id": "ann", "name": "Ann", "tags": []}

    async def test_create_enforces_required(self, users):
        with pytest.raises(FieldRequiredError):
            await users.create({"age": 3})

    async def test_skip_validation_stores_raw_data(self, users):
        created = await users.create({"anything": 1}, skip_validation=True)

        assert created["anything"] == 1

    async def test_skip_strip(self, users):
        created = await users.create({"name": "Ann", "extra": 1}, skip_strip=True)

        assert created["extra"] == 1

    async def test_skip_formatting_returns_snapshot(self, users):
        document = await users.create({"name": "Ann"}, skip_formatting=True)

        assert isinstance(document, StoredDocument)
        assert document.data["name"] == "Ann"

    async def test_before_save_sees_validated_record(self, store):
        seen = []

        async def before_save(data):
            seen.append(dict(data))

        schema = Schema(
            {"name": {"type": "string", "transform": str.title}},
            methods=SchemaMethods(before_save=before_save),
        )
        model = Model("people", schema, store)

        await model.create({"name": "ann lee", "junk": 1})

        assert seen == [{"name": "Ann Lee"}]

    async def test_sync_before_save_hook(self, store):
        seen = []
        schema = Schema({"name": {"type": "string"}}, methods=SchemaMethods(before_save=seen.append))

        await Model("people", schema, store).create({"name": "Ann"})

        assert seen == [{"name": "Ann"}]

    async def test_failing_validation_skips_hook_and_store(self, store):
        seen = []
        schema = Schema({"age": {"type": "number"}}, methods=SchemaMethods(before_save=seen.append))
        model = Model("people", schema, store)

        with pytest.raises(FieldTypeError):
            await model.create({"age": "old"}, id="x")

        assert seen == []
        assert await model.find_by_id("x") is None


class TestFind:

    async def test_missing_document(self, users):
        assert await users.find_by_id("nope") is None

        snapshot = await users.find_by_id("nope", skip_formatting=True)
        assert snapshot.exists is False

    async def test_find_returns_a_query(self, users):
        await users.create({"name": "Ann"}, id="a")
        await users.create({"name": "Bob"}, id="b")

        names = [doc["name"] for doc in await users.find().order_by("name", "desc").get()]

        assert names == ["Bob", "Ann"]


class TestUpdate:

    async def test_partial_dot_notation_update(self, users):
        await users.create({"name": "Ann", "details": {"bio": "old"}}, id="ann")

        assert await users.update_by_id("ann", {"details.bio": "new"}) == "ann"

        assert await users.find_by_id("ann") == {
            "id": "ann",
            "name": "Ann",
            "tags": [],
            "details": {"bio": "new", "is_admin": False},
        }

    async def test_update_skips_defaults_and_required(self, users):
        await users.create({"name": "Ann"}, id="ann")

        await users.update_by_id("ann", {"age": 30})

        assert (await users.find_by_id("ann"))["age"] == 30

    async def test_update_still_checks_rules(self, users):
        await users.create({"name": "Ann"}, id="ann")

        with pytest.raises(FieldTypeError):
            await users.update_by_id("ann", {"details.is_admin": "yes"})

    async def test_update_strips_unknown_paths(self, users):
        await users.create({"name": "Ann"}, id="ann")

        await users.update_by_id("ann", {"details.junk": 1, "age": 5})

        document = await users.find_by_id("ann")
        assert "details" not in document
        assert document["age"] == 5

    async def test_update_missing_document(self, users):
        with pytest.raises(DocumentNotFoundError):
            await users.update_by_id("nope", {"age": 1})


class TestDelete:

    async def test_delete(self, users):
        await users.create({"name": "Ann"}, id="ann")

        assert await users.delete_by_id("ann") == "ann"
        assert await users.find_by_id("ann") is None

    async def test_delete_missing_is_noop(self, users):
        assert await users.delete_by_id("nope") == "nope"


class TestModelValidate:

    async def test_defaults_suit_partial_records(self, users):
        assert await users.validate({"details.bio": "x"}) == {"details.bio": "x"}

    async def test_overriding_one_switch_keeps_the_others(self, users):
        result = await users.validate({"details.bio": "x", "extra": 1}, skip_strip=True)

        # required name still skipped, no defaults, still dot notation
        assert result == {"details.bio": "x", "extra": 1}

    async def test_required_can_be_switched_back_on(self, users):
        with pytest.raises(FieldRequiredError):
            await users.validate({"details.bio": "x"}, skip_required=False)

    async def test_defaults_can_be_switched_back_on(self, users):
        result = await users.validate({"name": "Ann"}, skip_default=False)

        assert result == {"name": "Ann", "tags": []}

    async def test_dot_notation_can_be_switched_off(self, users):
        result = await users.validate({"details": {"bio": "x"}}, allow_dot_notation=False)

        assert result == {"details": {"bio": "x"}}
