import pytest
from dateutil import tz

from condeval import Comparator, operators

WEIRD_VALUES = [None, "", "0", 0, 3.5, True, False, [], ["a", ["b"]], {"k": "v"}, object(), float("nan")]


def test_numeric_coerces_both_sides_to_float():
    c = Comparator("number")
    assert c.compare("==", "10", "10.0") is True
    assert c.compare(">", "5", "10") is False
    assert c.compare(">=", "3", "3") is True
    assert c.compare("<", "5", "4.99") is True
    assert c.compare("!=", "7", 7) is False


def test_numeric_non_numeric_strings_are_zero():
    c = Comparator("number_unit")
    assert c.compare("==", "abc", 0) is True
    assert c.compare("==", "12abc", 12) is True
    assert c.compare("<=", None, "") is True


def test_numeric_unknown_operator_fails_closed():
    assert Comparator("number").compare("contains", "1", "1") is False


def test_text_operators():
    c = Comparator("text")
    assert c.compare("contains", "WORLD", "hello world") is True
    assert c.compare("not_contains", "xyz", "hello world") is True
    assert c.compare("starts_with", "HeL", "hello") is True
    assert c.compare("ends_with", "LO", "hello") is True
    assert c.compare("==", "Hello", "hello") is False
    assert c.compare("!=", "Hello", "hello") is True


def test_text_empty_checks_compare_value_only():
    c = Comparator("text")
    assert c.compare("empty", "", "") is True
    assert c.compare("empty", "ignored", "0") is True
    assert c.compare("empty", "ignored", None) is True
    assert c.compare("not_empty", "", "a") is True
    assert c.compare("not_empty", "", " ") is True


def test_text_regex_uses_delimited_patterns():
    c = Comparator("text")
    assert c.compare("regex", "/^hel+o/i", "HELLO world") is True
    assert c.compare("regex", "#a|b#", "xbz") is True
    assert c.compare("regex", "{^\\d{3}$}", "123") is True
    assert c.compare("regex", "/^abc/", "xabc") is False
    assert c.compare("regex", "/abc/A", "abcd") is True
    assert c.compare("regex", "/abc/A", "xabc") is False


@pytest.mark.parametrize("pattern", ["/[unclosed/", "no-delimiters", "/abc/z", "/", "", "/abc"])
def test_text_malformed_regex_is_no_match(pattern):
    assert Comparator("text").compare("regex", pattern, "abc") is False


def test_unknown_type_falls_back_to_text():
    c = Comparator("no-such-type")
    assert c.compare("contains", "b", "abc") is True
    assert c.compare("yes", "", "1") is False


def test_text_unit_uses_text_semantics():
    assert Comparator("text_unit").compare("starts_with", "ab", "ABC") is True


def test_single_select_uses_loose_equality():
    c = Comparator("select")
    assert c.compare("==", "1", 1) is True
    assert c.compare("!=", "1", "1.0") is False
    assert c.compare("==", "gold", "silver") is False
    assert c.compare("any", "1", "1") is False


def test_collection_set_logic():
    c = Comparator("term")
    assert c.compare("any", ["a", "b"], ["b", "c"]) is True
    assert c.compare("all", ["a", "b"], ["a", "b", "c"]) is True
    assert c.compare("all", ["a", "d"], ["a", "b", "c"]) is False
    assert c.compare("none", ["a"], ["b", "c"]) is True
    assert c.compare("!=", ["b"], ["b", "c"]) is False
    assert c.compare("any", [], ["a"]) is False
    assert c.compare("all", [], ["a"]) is True


def test_collection_wraps_and_stringifies_scalars():
    c = Comparator("post")
    assert c.compare("==", 5, ["5", "6"]) is True
    assert c.compare("any", ["12"], 12) is True
    assert c.compare("any", ["1"], None) is False


def test_multiple_select_uses_collection_logic():
    c = Comparator("select", multiple=True)
    assert c.compare("any", ["us", "ca"], "ca") is True
    assert c.compare("all", ["us", "ca"], ["ca"]) is False


def test_ip_matching():
    c = Comparator("text")
    assert c.compare_ip("ip_match", ["192.168.1.0/24"], "192.168.1.55") is True
    assert c.compare_ip("ip_match", ["10.0.0.*"], "10.0.1.5") is False
    assert c.compare_ip("ip_not_match", [], "") is True
    assert c.compare_ip("ip_match", [], "") is False
    assert c.compare("ip_match", " 203.0.113.7 , ", "203.0.113.7") is False
    assert c.compare("ip_match", ["  203.0.113.7 "], "203.0.113.7") is True
    assert c.compare("ip_not_match", ["203.0.113.7"], "203.0.113.8") is True


def test_ip_operators_route_regardless_of_field_type():
    assert Comparator("number").compare("ip_match", "10.0.0.0/8", "10.20.30.40") is True


def test_ip_unparseable_address_takes_not_matched_branch():
    c = Comparator("text")
    assert c.compare("ip_match", ["10.0.0.*"], "not-an-ip") is False
    assert c.compare("ip_not_match", ["10.0.0.*"], "not-an-ip") is True


def test_email_matching():
    c = Comparator("text")
    assert c.compare("email_match", ["Jane@Example.com"], "jane@example.com") is True
    assert c.compare("email_match", ["@example.com"], "bob@example.com") is True
    assert c.compare("email_match", [".edu"], "prof@cs.uni.edu") is True
    assert c.compare("email_match", ["mailinator"], "x@mailinator.com") is True
    assert c.compare("email_match", ["@example.com"], "bob@example.org") is False
    assert c.compare("email_not_match", ["@example.com"], "bob@example.org") is True


def test_email_empty_inputs_take_not_matched_branch():
    c = Comparator("text")
    assert c.compare("email_match", ["@example.com"], "") is False
    assert c.compare("email_not_match", ["@example.com"], "") is True
    assert c.compare("email_match", ["  ", ""], "a@example.com") is False
    assert c.compare("email_not_match", [], "a@example.com") is True
    assert c.compare("email_match", ["example"], "not-an-email") is False
    assert c.compare("email_not_match", ["example"], "not-an-email") is True


def test_tags_quantifier_and_match_type():
    c = Comparator("tags")
    assert c.compare_tags("any_starts", ["pre"], "prefix-value") is True
    assert c.compare_tags("none_exact", ["exact"], "exactly") is True
    assert c.compare_tags("any_exact", [" Exact "], "EXACT") is True
    assert c.compare_tags("any_contains", ["fix"], "prefix") is True
    assert c.compare_tags("none_contains", ["fix"], "prefix") is False
    assert c.compare_tags("any_ends", [".ru", ".cn"], "shop.example.cn") is True


def test_tags_legacy_operators_use_suffix_matching():
    c = Comparator("tags")
    assert c.compare("any", ["com"], "example.com") is True
    assert c.compare("none", ["com"], "example.com") is False
    assert c.compare("any", ["example"], "example.com") is False


def test_tags_skip_blank_tags_and_unknown_operators_fail_closed():
    c = Comparator("tags")
    assert c.compare("any_contains", ["", "  "], "anything") is False
    assert c.compare("none_contains", ["", "  "], "anything") is True
    assert c.compare("any_foo", ["a"], "a") is False
    assert c.compare("foo", ["a"], "a") is False


@pytest.mark.parametrize("value", ["1", "true", "TRUE", " yes ", "on", True, 1])
def test_boolean_yes(value):
    c = Comparator("boolean")
    assert c.compare("yes", "ignored", value) is True
    assert c.compare("no", "ignored", value) is False


@pytest.mark.parametrize("value", ["0", "false", "no", "off", "", None, "maybe", 2, []])
def test_boolean_no(value):
    assert Comparator("boolean").compare("no", "ignored", value) is True


def test_date_compares_at_day_granularity():
    c = Comparator("date", tz=tz.UTC)
    assert c.compare("==", "2024-01-05", "2024-01-05 18:30") is True
    assert c.compare(">", "2024-01-05", "January 6, 2024") is True
    assert c.compare("<", "2024-01-05", "2024-01-04 23:59") is True
    assert c.compare(">=", "05 Jan 2024", "2024-01-05") is True
    assert c.compare("<=", "2024-01-05", "2024-01-06") is False
    assert c.compare("!=", "2024-01-05", "2024/01/05") is False


def test_date_truncates_in_configured_timezone():
    c = Comparator("date", tz=tz.gettz("America/New_York"))
    assert c.compare("==", "2024-01-05", "2024-01-06T02:00:00+00:00") is True
    assert Comparator("date", tz=tz.UTC).compare("==", "2024-01-05", "2024-01-06T02:00:00+00:00") is False


def test_date_unparseable_is_false():
    c = Comparator("date")
    assert c.compare("==", "2024-01-05", "not a date") is False
    assert c.compare("!=", "", "2024-01-05") is False
    assert c.compare("between", "2024-01-05", "2024-01-05") is False


def test_date_relative_keywords():
    c = Comparator("date")
    assert c.compare(">", "yesterday", "today") is True
    assert c.compare("<", "tomorrow", "now") is True


def test_time_supports_equality_and_after_only():
    c = Comparator("time")
    assert c.compare("==", "10:00", "10:00:00") is True
    assert c.compare("!=", "10:00", "10:00:01") is True
    assert c.compare(">", "09:30", "10:00") is True
    assert c.compare(">", "2pm", "13:59") is False
    assert c.compare("<", "10:00", "09:00") is False
    assert c.compare(">=", "10:00", "10:00") is False
    assert c.compare("<=", "10:00", "10:00") is False


def test_time_unparseable_is_false():
    c = Comparator("time")
    assert c.compare("==", "25:99", "10:00") is False
    assert c.compare("!=", "10:00", "") is False


def test_time_ignores_the_date_part():
    c = Comparator("time", tz=tz.UTC)
    assert c.compare(">", "09:00", "2024-05-01 08:00") is False
    assert c.compare(">", "09:00", "1999-12-31 09:30") is True
    assert c.compare("==", "2024-01-01 10:00", "2030-06-15T10:00:00") is True


def test_date_rejects_bare_numbers():
    c = Comparator("date", tz=tz.UTC)
    assert c.compare("==", "5", "2024-01-05") is False
    assert c.compare("!=", "2024-01-05", "12") is False
    assert c.compare("==", "20240105", "2024-01-05") is True


def test_unexpected_error_fails_closed(monkeypatch):
    def boom(self, operator, user_value, compare_value):
        raise RuntimeError("boom")

    monkeypatch.setattr(Comparator, "compare_ip", boom)
    c = Comparator("text")
    assert c.compare("ip_match", ["1.2.3.4"], "1.2.3.4") is False
    assert c.compare("ip_not_match", ["1.2.3.4"], "1.2.3.4") is True


def test_catalog_operators_never_raise_and_return_bool():
    for field_type in [t.value for t in operators.FieldType] + ["unknown"]:
        for multiple in (False, True):
            c = Comparator(field_type, multiple=multiple)
            ops = operators.operator_ids(operators.for_type(field_type, multiple)) + ("regex", "bogus")
            for op in ops:
                for user_value in WEIRD_VALUES:
                    for compare_value in WEIRD_VALUES:
                        assert isinstance(c.compare(op, user_value, compare_value), bool)


def test_comparison_is_idempotent():
    c = Comparator("tags")
    first = c.compare("none_ends", ["example.com"], "shop.example.com")
    second = c.compare("none_ends", ["example.com"], "shop.example.com")
    assert first is second is False


def test_comparator_is_immutable():
    c = Comparator("number")
    with pytest.raises(AttributeError):
        c.field_type = "text"
