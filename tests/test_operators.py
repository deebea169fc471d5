from condeval import operators
from condeval.operators import FieldType


def ids(field_type, multiple=False):
    return list(operators.operator_ids(operators.for_type(field_type, multiple)))


def test_numeric_and_date_types_get_six_relations():
    assert ids("number") == ["==", "!=", ">", "<", ">=", "<="]
    assert ids("number_unit") == ids("number")
    assert ids("date") == ids("number")


def test_time_only_offers_implemented_operators():
    assert ids("time") == ["==", "!=", ">"]


def test_select_depends_on_multiple():
    assert ids("select") == ["==", "!="]
    assert ids("select", multiple=True) == ["any", "none", "all"]


def test_collection_types_ignore_multiple():
    for field_type in ("post", "term", "user", "ajax"):
        assert ids(field_type) == ["any", "none", "all"]
        assert ids(field_type, multiple=True) == ["any", "none", "all"]


def test_unknown_type_gets_text_operators():
    assert operators.for_type("mystery") == operators.for_type("text")
    assert "contains" in ids("text_unit")


def test_pattern_types():
    assert ids("ip") == ["ip_match", "ip_not_match"]
    assert ids("email") == ["email_match", "email_not_match"]
    assert ids("tags")[:2] == ["any_exact", "none_exact"]
    assert ids("boolean") == ["yes", "no"]


def test_operators_carry_labels():
    first = operators.for_type("date")[2]
    assert first.id == ">"
    assert first.label == "Is after"


def test_field_type_parse_falls_back_to_text():
    assert FieldType.parse("tags") is FieldType.TAGS
    assert FieldType.parse(FieldType.DATE) is FieldType.DATE
    assert FieldType.parse("unheard-of") is FieldType.TEXT


def test_get_all_groups():
    groups = operators.get_all()
    assert "regex" in groups["text_advanced"]
    assert "regex" not in groups["text"]
    assert list(groups["collection_basic"]) == ["any", "none"]
    assert groups["contains"]["=="] == "Contains"
