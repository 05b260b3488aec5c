from __future__ import annotations

import pytest

from guestsync.domain.matching import find_match, normalized_name
from guestsync.domain.types import DownstreamRecord
from tests.helpers.reservations import make_source_record


@pytest.mark.parametrize(
    ("first", "last"),
    [
        ("Jane", "Doe"),
        ("  jane", "DOE  "),
        ("JANE", "doe"),
        ("Jane ", " Doe"),
    ],
)
def test_normalized_name_ignores_case_and_outer_whitespace(first: str, last: str) -> None:
    assert normalized_name(first, last) == "janedoe"


def test_normalized_name_handles_missing_parts() -> None:
    assert normalized_name(None, "Doe") == "doe"
    assert normalized_name(None, None) == ""


def test_find_match_prefers_reservation_id() -> None:
    source = make_source_record("res-1")
    by_name = DownstreamRecord(remote_id="pin-1", first_name="Jane", last_name="Doe")
    by_id = DownstreamRecord(remote_id="evt-1", reservation_id="res-1")

    assert find_match(source, [by_name, by_id]) is by_id


def test_find_match_never_uses_names_against_recorded_ids() -> None:
    source = make_source_record("res-1")
    other = DownstreamRecord(
        remote_id="evt-2", reservation_id="res-2", first_name="Jane", last_name="Doe"
    )

    assert find_match(source, [other]) is None


def test_find_match_falls_back_to_normalized_name() -> None:
    source = make_source_record(first_name="Jane", last_name="Doe")
    record = DownstreamRecord(remote_id="user-9", first_name=" JANE", last_name="doe ")

    assert find_match(source, [record]) is record


def test_find_match_returns_first_of_duplicate_names() -> None:
    source = make_source_record()
    first = DownstreamRecord(remote_id="user-1", first_name="Jane", last_name="Doe")
    second = DownstreamRecord(remote_id="user-2", first_name="jane", last_name="doe")

    assert find_match(source, [first, second]) is first


def test_find_match_ignores_blank_names() -> None:
    source = make_source_record(first_name="", last_name="")
    record = DownstreamRecord(remote_id="user-1")

    assert find_match(source, [record]) is None
