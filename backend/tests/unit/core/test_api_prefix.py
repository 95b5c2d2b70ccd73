from __future__ import annotations

import pytest

from tokenauth.api import _mount_prefix


@pytest.mark.parametrize(
    "segments, expected",
    [
        (("/api", "v1", ""), "/api/v1"),
        (("/api/", "v1", "/auth"), "/api/v1/auth"),
        (("", "v1", "/users/"), "/v1/users"),
        (("/", "v1", "/"), "/v1"),
    ],
)
def test_mount_prefix_joins_non_empty_segments(segments, expected):
    assert _mount_prefix(*segments) == expected
