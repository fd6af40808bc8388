from datetime import datetime, timezone

import pytest

from pullbuddy_core.utils.serialize import to_json


def test_datetimes_rendered_as_iso_strings():
    data = {"submitted_at": datetime(2026, 5, 4, 3, 2, 1, tzinfo=timezone.utc)}
    assert to_json(data) == '{"submitted_at": "2026-05-04T03:02:01+00:00"}'


def test_non_ascii_kept():
    assert to_json({"name": "Zoë"}) == '{"name": "Zoë"}'


def test_unknown_types_still_rejected():
    with pytest.raises(TypeError):
        to_json({"value": object()})
