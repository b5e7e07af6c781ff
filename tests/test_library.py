from datetime import datetime, timezone

import pytest

from lms.errors import (
    ItemAlreadyCheckedOut,
    ItemNotCheckedOut,
    ItemNotFound,
    MemberNotFound,
    NoCopiesAvailable,
)


def test_issue_to_new_member_example(lib):
    member, record = lib.issue_to_new_member(7, "Ada", "Lovelace")

    assert member.id == 1
    assert member.first_name == "Ada"
    assert lib.lookup_item(7).avail_copies == 1
    # Jan 31 + 1 month clamps to the leap day
    assert record.due_date == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)
    assert lib.lookup_member(1).holds(7)


def test_issue_then_return_round_trip(lib):
    member, _ = lib.issue_to_new_member(7, "Ada", "Lovelace")
    item = lib.return_item(7, member.id)

    assert item.id == 7
    assert item.avail_copies == 2
    assert lib.lookup_item(7).avail_copies == 2
    assert not lib.lookup_member(member.id).holds(7)


def test_issue_movie_due_in_two_months(lib):
    _, record = lib.issue_to_new_member(12)
    assert record.renew_factor == 2
    assert record.due_date == datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)


def test_issue_unknown_item(lib):
    with pytest.raises(ItemNotFound):
        lib.issue_to_new_member(99, "Ada", "Lovelace")
    assert list(lib.query_members()) == []
    assert [i.avail_copies for i in lib.query_catalog()] == [2, 1, 0]


def test_issue_without_copies_changes_nothing(lib):
    with pytest.raises(NoCopiesAvailable, match="No available copies left!"):
        lib.issue_to_new_member(20, "Ada", "Lovelace")
    assert lib.lookup_item(20).avail_copies == 0
    assert list(lib.query_members()) == []

    member = lib.register_member("Grace", "Hopper")
    with pytest.raises(NoCopiesAvailable):
        lib.issue_to_existing_member(20, member.id)
    assert lib.lookup_member(member.id).checkouts == {}


def test_last_copy_then_none_left(lib):
    lib.issue_to_new_member(12)
    with pytest.raises(NoCopiesAvailable):
        lib.issue_to_new_member(12)
    assert lib.lookup_item(12).avail_copies == 0


def test_issue_to_unknown_member(lib):
    with pytest.raises(MemberNotFound, match="Invalid Member ID!"):
        lib.issue_to_existing_member(7, 5)
    assert lib.lookup_item(7).avail_copies == 2


def test_issue_to_existing_member_many_items(lib):
    member = lib.register_member("Ada", "Lovelace")
    lib.issue_to_existing_member(7, member.id)
    lib.issue_to_existing_member(12, member.id)

    held = lib.lookup_member(member.id)
    assert sorted(held.checkouts) == [7, 12]
    assert held.checkout_summary() == "Dune (7), Alien (12)"


def test_reissue_same_item_rejected(lib):
    member, _ = lib.issue_to_new_member(7, "Ada", "Lovelace")
    with pytest.raises(ItemAlreadyCheckedOut):
        lib.issue_to_existing_member(7, member.id)
    assert lib.lookup_item(7).avail_copies == 1


def test_return_not_checked_out(lib):
    member = lib.register_member("Ada", "Lovelace")
    with pytest.raises(ItemNotCheckedOut, match="not checked out by this member"):
        lib.return_item(7, member.id)
    assert lib.lookup_item(7).avail_copies == 2


def test_return_unknown_member(lib):
    with pytest.raises(MemberNotFound, match="Member not found"):
        lib.return_item(7, 3)


def test_return_twice(lib):
    member, _ = lib.issue_to_new_member(7)
    lib.return_item(7, member.id)
    with pytest.raises(ItemNotCheckedOut):
        lib.return_item(7, member.id)
    assert lib.lookup_item(7).avail_copies == 2


def test_new_member_ids_strictly_increase(lib):
    first = lib.register_member("Ada", "Lovelace")
    second, _ = lib.issue_to_new_member(7, "Grace", "Hopper")
    third, _ = lib.issue_to_new_member(12)
    assert [first.id, second.id, third.id] == [1, 2, 3]


def test_failed_new_member_issue_does_not_use_an_id(lib):
    with pytest.raises(ItemNotFound):
        lib.issue_to_new_member(99)
    member, _ = lib.issue_to_new_member(7)
    assert member.id == 1


def test_renew_extends_due_date(lib):
    member, record = lib.issue_to_new_member(7)
    renewed = lib.renew(7, member.id)
    assert renewed.due_date == datetime(2024, 3, 29, 12, 0, tzinfo=timezone.utc)
    assert record.due_date == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)
    assert lib.lookup_member(member.id).checkouts[7] == renewed
    assert lib.lookup_item(7).avail_copies == 1


def test_query_results_are_snapshots(lib):
    catalog = lib.query_catalog()
    members = lib.query_members()
    lib.issue_to_new_member(7)

    assert [i.avail_copies for i in catalog] == [2, 1, 0]
    assert list(members) == []

    returned_view = lib.lookup_item(7)
    returned_view.avail_copies = 0
    assert lib.lookup_item(7).avail_copies == 1


def test_statistics(lib):
    lib.issue_to_new_member(7)
    assert lib.get_statistics() == {
        "total_items": 3,
        "total_copies": 6,
        "available_copies": 2,
        "members": 1,
    }


def test_load_catalog_adds_to_existing(lib, tmp_path):
    extra = tmp_path / "extra.csv"
    extra.write_text(
        "title,author,year,edition,desc,format,id,copies,avail_copies,ratings\n"
        "Emma,Jane Austen,1815,1st,Matchmaking,book,30,1,1,4\n"
    )
    assert lib.load_catalog(str(extra)) == 1
    assert lib.lookup_item(30).author == "Jane Austen"
    assert len(list(lib.query_catalog())) == 4
