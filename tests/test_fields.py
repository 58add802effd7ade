from __future__ import annotations

import sys

import pytest

from routemap.services.fields import STOP_ID_KEYS, first_present, first_text


def test_first_present_skips_blank_values():
    assert first_present({"id": "  ", "stopId": None, "stop_id": "s-1"}, STOP_ID_KEYS) == "s-1"
    assert first_present(["id"], STOP_ID_KEYS) is None


def test_first_text_accepts_numbers_but_not_bools():
    assert first_text({"id": 42}, STOP_ID_KEYS) == "42"
    assert first_text({"id": True, "stopId": " s-2 "}, STOP_ID_KEYS) == "s-2"
    assert first_text({"id": {"nested": 1}}, STOP_ID_KEYS) is None


@pytest.mark.skipif(not hasattr(sys, "set_int_max_str_digits"), reason="no int digit limit on this interpreter")
def test_first_text_skips_ints_too_long_to_print():
    assert first_text({"id": 10**5000, "stopId": "s-3"}, STOP_ID_KEYS) == "s-3"
    assert first_text({"id": 10**5000}, STOP_ID_KEYS) is None
