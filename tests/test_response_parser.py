import copy

import pytest

from src.breakdown.services import response_parser as rp
from .utils import as_reply, breakdown_payload, tier


def test_extract_json_object_fallback():
    txt = "prefix {\n \"a\": 1\n} suffix"
    result = rp.extract_json_object(txt)
    assert isinstance(result, rp.ParsedOk)
    assert result.data == {"a": 1}


def test_extract_ignores_braces_inside_strings():
    txt = 'Result: {"overview": "uses {templating} and \\"quoted }\\" text", "n": {"k": 2}} trailing }'
    result = rp.extract_json_object(txt)
    assert isinstance(result, rp.ParsedOk)
    assert result.data["overview"] == 'uses {templating} and "quoted }" text'
    assert result.data["n"] == {"k": 2}


def test_extract_skips_fragments_that_do_not_decode():
    txt = 'Replace {name} with yours: {"a": 1}'
    result = rp.extract_json_object(txt)
    assert result == rp.ParsedOk({"a": 1})


def test_extract_reports_missing_object():
    for txt in ("", "no json here", "[1, 2, 3]", "{ never closed"):
        result = rp.extract_json_object(txt)
        assert isinstance(result, rp.ParseFailed), txt


def test_extract_reports_decode_error_reason():
    result = rp.extract_json_object("{'single': 'quotes'}")
    assert isinstance(result, rp.ParseFailed)
    assert result.reason.startswith("invalid JSON")


def test_greedy_mode_spans_first_to_last_brace():
    ok = rp.extract_json_object('x {"a": {"b": 1}} y', mode="greedy")
    assert ok == rp.ParsedOk({"a": {"b": 1}})

    # Two objects in one reply: the greedy span covers both and fails
    failed = rp.extract_json_object('{"a": 1} and {"b": 2}', mode="greedy")
    assert isinstance(failed, rp.ParseFailed)
    assert rp.extract_json_object('{"a": 1} and {"b": 2}') == rp.ParsedOk({"a": 1})


def test_normalize_requires_top_level_keys():
    for key in rp.REQUIRED_KEYS:
        payload = breakdown_payload()
        payload[key] = None
        result = rp.normalize_breakdown(payload)
        assert isinstance(result, rp.ParseFailed)
        assert key in result.reason

    result = rp.normalize_breakdown(breakdown_payload(overview=""))
    assert isinstance(result, rp.ParseFailed)


def test_normalize_rejects_non_object_priorities():
    result = rp.normalize_breakdown(breakdown_payload(priorities=["p0"]))
    assert isinstance(result, rp.ParseFailed)


def test_empty_collections_count_as_present():
    result = rp.normalize_breakdown(breakdown_payload(priorities={}, developmentSteps=[]))
    assert isinstance(result, rp.ParsedOk)
    assert set(result.data["priorities"]) == {"p0", "p1", "p2"}
    assert result.data["developmentSteps"] == []


def test_normalize_backfills_without_mutating_input():
    payload = breakdown_payload(priorities={"p1": tier(), "p2": None})
    original = copy.deepcopy(payload)
    result = rp.normalize_breakdown(payload)
    assert isinstance(result, rp.ParsedOk)
    assert payload == original

    priorities = result.data["priorities"]
    assert priorities["p0"] == rp.DEFAULT_PRIORITY
    assert priorities["p1"] == tier()
    assert priorities["p2"] == rp.DEFAULT_PRIORITY
    # Each backfilled tier is its own structure
    priorities["p0"]["frontend"]["components"].append({"name": "x"})
    assert priorities["p2"]["frontend"]["components"] == []
    assert rp.DEFAULT_PRIORITY["frontend"]["components"] == []


def test_normalize_keeps_extra_keys():
    payload = breakdown_payload(risks=["scope creep"])
    payload["priorities"]["p3"] = tier()
    result = rp.normalize_breakdown(payload)
    assert isinstance(result, rp.ParsedOk)
    assert result.data["risks"] == ["scope creep"]
    assert "p3" in result.data["priorities"]


def test_parse_breakdown_end_to_end():
    result = rp.parse_breakdown(as_reply(breakdown_payload(priorities={"p0": tier()})))
    assert isinstance(result, rp.ParsedOk)
    assert result.data["priorities"]["p1"] == rp.default_priority()

    missing = breakdown_payload()
    del missing["systemArchitecture"]
    assert isinstance(rp.parse_breakdown(as_reply(missing)), rp.ParseFailed)


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
@pytest.mark.parametrize("mode", ["balanced", "greedy"])
def test_non_finite_numbers_are_not_json(token, mode):
    result = rp.extract_json_object('Sure! {"overview": "x", "score": %s}' % token, mode=mode)
    assert isinstance(result, rp.ParseFailed)
    assert token.lstrip("-") in result.reason


@pytest.mark.parametrize("falsy", [None, False, "", 0, 0.0])
def test_falsy_required_values_count_as_missing(falsy):
    for key in rp.REQUIRED_KEYS:
        result = rp.normalize_breakdown(breakdown_payload(**{key: falsy}))
        assert isinstance(result, rp.ParseFailed), (key, falsy)
        assert key in result.reason


def test_falsy_tiers_are_backfilled():
    result = rp.normalize_breakdown(breakdown_payload(priorities={"p0": tier(), "p1": False, "p2": 0}))
    assert isinstance(result, rp.ParsedOk)
    assert result.data["priorities"]["p1"] == rp.DEFAULT_PRIORITY
    assert result.data["priorities"]["p2"] == rp.DEFAULT_PRIORITY
