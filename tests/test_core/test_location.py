"""
Tests identifier extraction from Location headers.
"""

import pytest

from realmgroups.core.location import ResponseParseError, id_from_location


@pytest.mark.parametrize(
    "location, expected",
    [
        ("https://idp.example.org/admin/realms/test/groups/abc-123", "abc-123"),
        ("/admin/realms/test/groups/abc-123", "abc-123"),
        ("https://idp.example.org/admin/realms/test/groups/abc-123?x=1", "abc-123"),
        ("https://idp.example.org/admin/realms/test/groups/a%20b", "a b"),
        ("  https://idp.example.org/groups/xyz  ", "xyz"),
    ],
)
def test_id_from_location(location, expected):
    assert id_from_location(location) == expected


@pytest.mark.parametrize(
    "location",
    [
        None,
        "",
        "   ",
        "https://idp.example.org/admin/realms/test/groups/",
        "https://idp.example.org",
        "http://[::1/groups/abc",
    ],
)
def test_id_from_location_invalid(location):
    with pytest.raises(ResponseParseError) as e:
        id_from_location(location)

    assert e.value.location == location
