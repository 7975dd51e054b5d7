"""Explanation registry tests."""

from __future__ import annotations

from depguard import ids
from depguard.explain import all_check_ids, all_codes, format_explanation, lookup_explanation


def test_every_emittable_pair_has_an_explanation() -> None:
    for check_id, codes in ids.CHECK_CODES.items():
        assert lookup_explanation(check_id) is not None, check_id
        for code in codes:
            explanation = lookup_explanation(code)
            assert explanation is not None, code
            assert explanation.remediation
            assert explanation.before and explanation.after


def test_enumerations_cover_registry() -> None:
    assert set(all_check_ids()) == set(ids.CHECK_CODES)
    expected_codes = {code for codes in ids.CHECK_CODES.values() for code in codes}
    assert set(all_codes()) == expected_codes


def test_unknown_identifier() -> None:
    assert lookup_explanation("deps.does_not_exist") is None


def test_format_explanation_layout() -> None:
    text = format_explanation("wildcard_version", lookup_explanation("wildcard_version"))
    lines = text.splitlines()
    assert lines[0] == "Wildcard Version (wildcard_version)"
    assert "Remediation:" in lines
    assert "    serde = \"*\"" in lines
    assert "    serde = \"1.0\"" in lines
    assert text.endswith("\n")
