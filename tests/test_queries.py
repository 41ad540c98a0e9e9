from datetime import datetime, timedelta

import pytest

from memo_core.queries import (
    RecencyBucket,
    Scope,
    SortKey,
    active_notes,
    group_by_recency,
    notes_in_scope,
    partition_by_pin,
    recency_bucket,
    search,
    sort_notes,
    trashed_notes,
)
from memo_core.schemas import NoteOut

# Wednesday
NOW = datetime(2026, 10, 14, 18, 0)


def make_note(note_id, title="", content="", updated=NOW, created=None, pinned=False, trashed=None, folder_id=None):
    return NoteOut(
        id=note_id,
        title=title,
        content=content,
        created_at=created or updated,
        updated_at=updated,
        is_pinned=pinned,
        trashed_at=trashed,
        folder_id=folder_id,
    )


def ids(notes):
    return [n.id for n in notes]


def test_active_and_trashed_partition_every_note():
    notes = [
        make_note(1, folder_id=1),
        make_note(2, trashed=NOW),
        make_note(3),
        make_note(4, folder_id=1, trashed=NOW),
    ]
    active = active_notes(notes)
    trashed = trashed_notes(notes)
    assert ids(active) == [1, 3]
    assert ids(trashed) == [2, 4]
    assert sorted(ids(active) + ids(trashed)) == [1, 2, 3, 4]


def test_folder_scope_matches_exact_folder_only():
    notes = [make_note(1, folder_id=1), make_note(2), make_note(3, folder_id=2), make_note(4, folder_id=1, trashed=NOW)]
    assert ids(active_notes(notes, folder_id=1)) == [1]
    assert ids(notes_in_scope(notes, Scope.folder(2))) == [3]
    assert ids(notes_in_scope(notes, Scope.all())) == [1, 2, 3]
    assert ids(notes_in_scope(notes, Scope.trash())) == [4]


def test_search_is_case_insensitive_on_title_or_content():
    meeting = make_note(1, title="Meeting", content="budget review")
    other = make_note(2, title="Groceries", content="milk")
    notes = [meeting, other]
    assert ids(search(notes, "budget")) == [1]
    assert ids(search(notes, "BUDGET")) == [1]
    assert ids(search(notes, "meet")) == [1]
    assert search(notes, "xyz") == []


def test_search_matches_literal_substrings_not_tokens():
    note = make_note(1, content="budget review")
    assert search([note], "get rev") == [note]
    assert search([note], "review budget") == []


def test_empty_search_is_identity():
    notes = [make_note(2), make_note(1)]
    assert search(notes, "") == notes


def test_sort_by_updated_newest_first_ties_by_id():
    notes = [
        make_note(3, updated=NOW),
        make_note(1, updated=NOW - timedelta(days=1)),
        make_note(2, updated=NOW),
    ]
    assert ids(sort_notes(notes, SortKey.UPDATED)) == [2, 3, 1]


def test_sort_by_created_newest_first():
    notes = [
        make_note(1, created=NOW - timedelta(days=2)),
        make_note(2, created=NOW),
        make_note(3, created=NOW - timedelta(days=1)),
    ]
    assert ids(sort_notes(notes, SortKey.CREATED)) == [2, 3, 1]


def test_sort_by_title_is_case_sensitive_ascending():
    notes = [make_note(1, title="banana"), make_note(2, title="Apple"), make_note(3, title="apple"), make_note(4, title="Apple")]
    assert ids(sort_notes(notes, SortKey.TITLE)) == [2, 4, 3, 1]


def test_sort_does_not_mutate_input():
    notes = [make_note(1, updated=NOW - timedelta(hours=1)), make_note(2)]
    sort_notes(notes)
    assert ids(notes) == [1, 2]


def test_partition_by_pin_keeps_order():
    notes = [make_note(1, pinned=True), make_note(2), make_note(3, pinned=True), make_note(4)]
    pinned, unpinned = partition_by_pin(notes)
    assert ids(pinned) == [1, 3]
    assert ids(unpinned) == [2, 4]


def test_group_by_recency_scenario():
    n1 = make_note(1, updated=NOW - timedelta(hours=2))
    n2 = make_note(2, updated=NOW - timedelta(days=1))
    n3 = make_note(3, updated=NOW - timedelta(days=40))
    groups = group_by_recency([n3, n1, n2], NOW)
    assert [(bucket, ids(notes)) for bucket, notes in groups] == [
        (RecencyBucket.TODAY, [1]),
        (RecencyBucket.YESTERDAY, [2]),
        (RecencyBucket.OLDER, [3]),
    ]


@pytest.mark.parametrize(
    "moment, expected",
    [
        (datetime(2026, 10, 14, 0, 0), RecencyBucket.TODAY),
        (datetime(2026, 10, 13, 23, 59), RecencyBucket.YESTERDAY),
        (datetime(2026, 10, 12, 8, 0), RecencyBucket.THIS_WEEK),   # Monday
        (datetime(2026, 10, 11, 8, 0), RecencyBucket.THIS_MONTH),  # Sunday, previous ISO week
        (datetime(2026, 10, 1, 8, 0), RecencyBucket.THIS_MONTH),
        (datetime(2026, 9, 30, 8, 0), RecencyBucket.OLDER),
    ],
)
def test_recency_bucket_boundaries(moment, expected):
    assert recency_bucket(moment, NOW) is expected


def test_yesterday_wins_over_this_week_across_month_start():
    now = datetime(2026, 6, 1, 9, 0)  # Monday
    assert recency_bucket(datetime(2026, 5, 31, 22, 0), now) is RecencyBucket.YESTERDAY
    assert recency_bucket(datetime(2026, 5, 30, 22, 0), now) is RecencyBucket.OLDER


def test_group_buckets_are_resorted_by_key():
    notes = [
        make_note(1, title="b", updated=NOW - timedelta(hours=3)),
        make_note(2, title="a", updated=NOW - timedelta(hours=1)),
        make_note(3, title="c", updated=NOW - timedelta(hours=2)),
    ]
    [(bucket, by_title)] = group_by_recency(notes, NOW, SortKey.TITLE)
    assert bucket is RecencyBucket.TODAY
    assert ids(by_title) == [2, 1, 3]
    [(_, by_updated)] = group_by_recency(notes, NOW)
    assert ids(by_updated) == [2, 3, 1]


def test_group_of_nothing_is_empty():
    assert group_by_recency([], NOW) == []


def test_group_by_recency_leaves_out_pinned_notes():
    groups = group_by_recency([make_note(1, pinned=True), make_note(2)], NOW)
    assert [(bucket, ids(notes)) for bucket, notes in groups] == [(RecencyBucket.TODAY, [2])]


def test_sort_accepts_plain_string_key():
    notes = [make_note(1, title="b", updated=NOW), make_note(2, title="a", updated=NOW - timedelta(hours=1))]
    assert ids(sort_notes(notes, "updated")) == [1, 2]
    assert ids(sort_notes(notes, "title")) == [2, 1]
