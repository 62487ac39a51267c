"""
Conformance scenarios every channel backend must pass.

Runs against each backend through the parametrized ``channel`` fixture.
"""

import pytest

from data_channels import (
    DuplicateIdError,
    QueryOptions,
    RecordNotFoundError,
    UpdateType,
)


class TestCrudAndUpdates:
    """Create, read, update, remove and the update log they produce."""

    @pytest.mark.asyncio
    async def test_create_adds_record(self, channel):
        """Created records get a version and show up in get_ids."""
        record = await channel.create({"id": "id1", "field": "field", "version": 0})

        assert record["id"] == "id1"
        assert record["version"] > 0
        assert await channel.get_ids(None, None) == ["id1"]

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, channel):
        """Records without id get a non-empty generated one."""
        record = await channel.create({"field": "field"})

        assert isinstance(record["id"], str)
        assert record["id"]
        assert record["version"] > 0
        assert await channel.get_ids() == [record["id"]]

    @pytest.mark.asyncio
    async def test_update_existing_record(self, channel):
        """Update bumps the version and logs CREATED then CHANGED."""
        cursor = await channel.get_version()
        created = await channel.create({"id": "id1", "field": "field", "version": 0})
        first_version = created["version"]
        assert first_version > 0

        updated = await channel.update({"id": "id1", "field": "field2"})

        assert updated["version"] > first_version
        assert updated["field"] == "field2"
        assert await channel.get_ids() == ["id1"]

        updates = await channel.get_updates(cursor)
        assert [u.id for u in updates] == ["id1", "id1"]
        assert [u.type for u in updates] == [UpdateType.CREATED, UpdateType.CHANGED]
        assert all(u.version is not None for u in updates)

    @pytest.mark.asyncio
    async def test_read_created_record(self, channel):
        """A created record can be read back by its id."""
        record = await channel.create({"field": "field"})

        read = await channel.read(record["id"])

        assert read["field"] == "field"

    @pytest.mark.asyncio
    async def test_read_missing_record(self, channel):
        """Reading an unknown id returns None rather than failing."""
        assert await channel.read("missing") is None

    @pytest.mark.asyncio
    async def test_remove_logs_delete(self, channel):
        """Remove logs CREATED then DELETED with increasing positions."""
        record = await channel.create({"field": "field"})

        await channel.remove(record["id"])

        updates = await channel.get_updates(None, None, None)
        assert len(updates) == 2
        assert [u.id for u in updates] == [record["id"], record["id"]]
        assert [u.type for u in updates] == [UpdateType.CREATED, UpdateType.DELETED]
        assert int(updates[1].version) > int(updates[0].version)
        assert await channel.read(record["id"]) is None

    @pytest.mark.asyncio
    async def test_read_many(self, channel):
        """read_many returns the requested records."""
        await channel.create({"id": "id1", "field": "value1"})
        await channel.create({"id": "id2", "field": "value2"})
        await channel.create({"id": "id3", "field": "value3"})

        records = await channel.read_many(["id1", "id2", "unknown"])

        assert sorted(r["id"] for r in records) == ["id1", "id2"]

    @pytest.mark.asyncio
    async def test_read_many_all(self, channel):
        """read_many(None) returns every record."""
        await channel.create({"id": "id1"})
        await channel.create({"id": "id2"})

        records = await channel.read_many(None)

        assert [r["id"] for r in records] == ["id1", "id2"]

    @pytest.mark.asyncio
    async def test_create_many(self, channel):
        """create_many stores every record of the batch."""
        created = await channel.create_many(
            [{"id": "id1", "field": "value1"}, {"id": "id2", "field": "value2"}]
        )

        assert [r["id"] for r in created] == ["id1", "id2"]
        records = await channel.read_many(["id1", "id2"])
        assert {r["id"] for r in records} == {"id1", "id2"}
        updates = await channel.get_updates()
        assert [(u.type, u.id) for u in updates] == [
            (UpdateType.CREATED, "id1"),
            (UpdateType.CREATED, "id2"),
        ]

    @pytest.mark.asyncio
    async def test_versions_increase_per_mutation(self, channel):
        """Every mutation of a record yields a strictly greater version."""
        record = await channel.create({"id": "id1", "n": 0})
        versions = [record["version"]]
        for n in range(1, 5):
            versions.append((await channel.update({"id": "id1", "n": n}))["version"])

        assert versions == sorted(versions)
        assert len(set(versions)) == len(versions)


class TestErrors:
    """Failures leave the channel unchanged."""

    @pytest.mark.asyncio
    async def test_update_missing_record(self, channel):
        """Updating an unknown id fails with RecordNotFoundError."""
        await channel.create({"id": "id1", "field": "a"})
        cursor = await channel.get_version()

        with pytest.raises(RecordNotFoundError) as exc_info:
            await channel.update({"id": "missing", "field": "b"})

        assert exc_info.value.record_id == "missing"
        assert await channel.get_version() == cursor
        assert await channel.get_ids() == ["id1"]

    @pytest.mark.asyncio
    async def test_remove_missing_record(self, channel):
        """Removing an unknown id fails with RecordNotFoundError."""
        await channel.create({"id": "id1"})
        cursor = await channel.get_version()

        with pytest.raises(RecordNotFoundError):
            await channel.remove("missing")

        assert await channel.get_version() == cursor
        assert await channel.get_ids() == ["id1"]

    @pytest.mark.asyncio
    async def test_create_duplicate_id(self, channel):
        """Creating an existing id fails and keeps the original record."""
        original = await channel.create({"id": "id1", "field": "a"})
        cursor = await channel.get_version()

        with pytest.raises(DuplicateIdError):
            await channel.create({"id": "id1", "field": "b"})

        assert (await channel.read("id1"))["field"] == "a"
        assert (await channel.read("id1"))["version"] == original["version"]
        assert await channel.get_version() == cursor

    @pytest.mark.asyncio
    async def test_create_many_internal_duplicate(self, channel):
        """A batch repeating an id is rejected as a whole."""
        with pytest.raises(DuplicateIdError):
            await channel.create_many([{"id": "a"}, {"id": "b"}, {"id": "a"}])

        assert await channel.read_many(["a", "b"]) == []
        assert await channel.get_ids() == []
        assert await channel.get_version() == "0"

    @pytest.mark.asyncio
    async def test_create_many_existing_duplicate(self, channel):
        """A batch colliding with a stored id inserts nothing."""
        await channel.create({"id": "b", "field": "kept"})

        with pytest.raises(DuplicateIdError):
            await channel.create_many([{"id": "a"}, {"id": "b"}, {"id": "c"}])

        assert await channel.get_ids() == ["b"]
        assert (await channel.read("b"))["field"] == "kept"
        assert await channel.get_version() == "1"


class TestFilteredQueries:
    """Regex and equality filters on get_ids and get_updates."""

    @pytest.mark.asyncio
    async def test_regex_filter(self, channel):
        """{field: "a.c"} matches "abc" but not "def"."""
        await channel.create({"id": "id1", "field": "abc"})
        await channel.create({"id": "id2", "field": "def"})
        filter = {"field": "a.c"}

        assert await channel.get_ids(filter, None) == ["id1"]

        updates = await channel.get_updates(None, filter, None)
        assert len(updates) == 1
        assert updates[0].id == "id1"
        assert updates[0].type == UpdateType.CREATED
        assert int(updates[0].version) < int(await channel.get_version())

    @pytest.mark.asyncio
    async def test_numeric_filter(self, channel):
        """Numeric tests require a number-typed, equal field."""
        await channel.create({"id": "id1", "n": 3})
        await channel.create({"id": "id2", "n": "3"})
        await channel.create({"id": "id3", "n": 4})

        assert await channel.get_ids({"n": 3}) == ["id1"]

    @pytest.mark.asyncio
    async def test_deleted_records_never_pass_filter(self, channel):
        """Filtering uses current state, so delete entries drop out."""
        await channel.create({"id": "id1", "field": "abc"})
        await channel.remove("id1")

        assert await channel.get_updates(None, {"field": "abc"}) == []
        assert await channel.get_updates(None, {}) == []
        assert len(await channel.get_updates(None)) == 2

    @pytest.mark.asyncio
    async def test_records_leaving_filter_drop_history(self, channel):
        """A record changed out of the filter loses all its entries."""
        await channel.create({"id": "id1", "field": "abc"})
        await channel.update({"id": "id1", "field": "xyz"})

        assert await channel.get_updates(None, {"field": "abc"}) == []
        assert len(await channel.get_updates(None, {"field": "xyz"})) == 2


class TestLimitedQueries:
    """Ordering, offset and count."""

    @pytest.mark.asyncio
    async def test_count_and_order(self, channel):
        """Only the requested count is returned, in the requested order."""
        await channel.create({"id": "id1", "field": "abc"})
        await channel.create({"id": "id2", "field": "def"})

        assert len(await channel.get_ids(None, None)) == 2
        assert len(await channel.get_updates(None, None, None)) == 2

        options = {"from": 0, "count": 1, "order": {"field": 1}}
        assert await channel.get_ids(None, options) == ["id1"]
        updates = await channel.get_updates(None, None, options)
        assert [u.id for u in updates] == ["id1"]

        options["order"]["field"] = -1
        assert await channel.get_ids(None, options) == ["id2"]
        updates = await channel.get_updates(None, None, options)
        assert [u.id for u in updates] == ["id2"]

    @pytest.mark.asyncio
    async def test_offset(self, channel):
        """Offset drops leading results after sorting."""
        await channel.create_many([{"id": f"id{n}", "n": n} for n in range(5)])

        options = QueryOptions(order=[("n", -1)], offset=1, count=2)

        assert await channel.get_ids(None, options) == ["id3", "id2"]

    @pytest.mark.asyncio
    async def test_get_version_pairs(self, channel):
        """getVersion returns "id:version" strings."""
        record = await channel.create({"field": "field"})

        assert await channel.get_ids(None, None) == [record["id"]]
        assert await channel.get_ids(None, {"getVersion": True}) == [
            f"{record['id']}:{record['version']}"
        ]
