"""Tests for FileRecord persistence and owner-scoped queries."""

from datetime import datetime, timedelta, timezone

import pytest

from filevault.exceptions import NotFound
from filevault.models.file import FileRecord

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_record(owner, name, size=10, minutes=0, storage_name=None):
    return FileRecord(
        owner_id=owner.id,
        filename=storage_name or f'{name}-{minutes}.bin',
        original_filename=name,
        file_size=size,
        content_type='text/plain',
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


async def test_create_assigns_id_and_timestamps(record_store, alice):
    record = await record_store.create(make_record(alice, 'a.txt'))

    assert record.id
    assert record.created_at is not None
    assert record.updated_at is not None
    assert record.is_public is False
    assert record.public_link_id is None


async def test_find_by_owner_ordered_newest_first_with_paging(record_store, alice, bob):
    for minute in range(5):
        await record_store.create(make_record(alice, f'file{minute}.txt', minutes=minute))
    await record_store.create(make_record(bob, 'bob.txt', minutes=10))

    first = await record_store.find_by_owner_ordered(alice.id, page=0, size=2)
    last = await record_store.find_by_owner_ordered(alice.id, page=2, size=2)

    assert [r.original_filename for r in first.items] == ['file4.txt', 'file3.txt']
    assert [r.original_filename for r in last.items] == ['file0.txt']
    assert first.total == 5
    assert first.total_pages == 3


async def test_search_matches_either_name_case_insensitively(record_store, alice, bob):
    await record_store.create(make_record(alice, 'Quarterly Report.pdf', minutes=1))
    await record_store.create(make_record(alice, 'holiday.png', minutes=2, storage_name='REPORT-blob.png'))
    await record_store.create(make_record(alice, 'notes.txt', minutes=3))
    await record_store.create(make_record(bob, 'report.txt', minutes=4))

    page = await record_store.find_by_owner_and_name_contains(alice.id, 'report', 0, 10)

    assert {r.original_filename for r in page.items} == {'Quarterly Report.pdf', 'holiday.png'}
    assert page.total == 2


async def test_search_treats_wildcards_literally(record_store, alice):
    await record_store.create(make_record(alice, '100%_done.txt', minutes=1))
    await record_store.create(make_record(alice, '1000 done.txt', minutes=2))

    page = await record_store.find_by_owner_and_name_contains(alice.id, '0%_', 0, 10)

    assert [r.original_filename for r in page.items] == ['100%_done.txt']


@pytest.mark.parametrize('search', [None, '', '   '])
async def test_blank_search_lists_everything(record_store, alice, search):
    await record_store.create(make_record(alice, 'a.txt', minutes=1))
    await record_store.create(make_record(alice, 'b.txt', minutes=2))

    page = await record_store.find_by_owner_and_name_contains(alice.id, search, 0, 10)

    assert [r.original_filename for r in page.items] == ['b.txt', 'a.txt']


async def test_find_by_id_and_owner_is_owner_scoped(record_store, alice, bob):
    record = await record_store.create(make_record(bob, 'secret.txt'))

    assert (await record_store.find_by_id_and_owner(record.id, bob.id)).id == record.id
    for _ in range(2):
        with pytest.raises(NotFound):
            await record_store.find_by_id_and_owner(record.id, alice.id)
    with pytest.raises(NotFound):
        await record_store.find_by_id_and_owner('no-such-id', bob.id)


async def test_find_by_public_link_id(record_store, alice):
    record = await record_store.create(make_record(alice, 'shared.txt'))
    record.public_link_id = 'link-1'
    record.is_public = True
    await record_store.save(record)

    found = await record_store.find_by_public_link_id('link-1')

    assert found.id == record.id
    with pytest.raises(NotFound):
        await record_store.find_by_public_link_id('link-2')


async def test_totals_default_to_zero(record_store, alice):
    assert await record_store.count_for_owner(alice.id) == 0
    assert await record_store.total_size_for_owner(alice.id) == 0


async def test_totals_per_owner(record_store, alice, bob):
    await record_store.create(make_record(alice, 'a.txt', size=100, minutes=1))
    await record_store.create(make_record(alice, 'b.txt', size=23, minutes=2))
    await record_store.create(make_record(bob, 'c.txt', size=1000, minutes=3))

    assert await record_store.count_for_owner(alice.id) == 2
    assert await record_store.total_size_for_owner(alice.id) == 123


async def test_delete(record_store, alice):
    record = await record_store.create(make_record(alice, 'gone.txt'))

    await record_store.delete(record)

    with pytest.raises(NotFound):
        await record_store.find_by_id_and_owner(record.id, alice.id)
