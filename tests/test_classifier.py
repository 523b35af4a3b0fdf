import pytest

from nspoli_donors import CategoryBucket, classify, color_hint
from nspoli_donors.classifier import (
    DEFAULT_RULES,
    STRICT_RULES,
    ClassifierRule,
    rules_for_profile,
)


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("PC", CategoryBucket.PC),
        ("pc", CategoryBucket.PC),
        (" CPC ", CategoryBucket.CPC),
        ("LPC", CategoryBucket.LPC),
        ("NSNDP", CategoryBucket.NSNDP),
        ("NDP-CA", CategoryBucket.NDPCA),
        ("ndp", CategoryBucket.NDP),
        ("Nova Scotia Liberal Party", CategoryBucket.LIBERAL),
        ("Liberal Party of Canada", CategoryBucket.LIBERAL),
        ("LPC Nova Scotia", CategoryBucket.LPC),
        ("NDP Caucus", CategoryBucket.NDP),
        ("Green Party", CategoryBucket.GREEN),
        ("Atlantica Party", CategoryBucket.ATLANTICA),
    ],
)
def test_classify_precedence(label, expected):
    assert classify(label) is expected


@pytest.mark.parametrize("label", ["", "   ", None, "Independent", "PC Party", "Progressive Conservative"])
def test_unclassified_labels(label):
    assert classify(label) is None


def test_exact_forms_beat_substring_ndp():
    # Both contain "ndp"; swapping the exact and substring stages would
    # turn them into plain NDP.
    assert classify("NSNDP") is not CategoryBucket.NDP
    assert classify("NDP-CA") is not CategoryBucket.NDP


def test_strict_profile_drops_loose_ndp_rule():
    assert classify("NDP Caucus", rules=STRICT_RULES) is None
    assert classify("ndp", rules=STRICT_RULES) is CategoryBucket.NDP
    assert classify("NSNDP", rules=STRICT_RULES) is CategoryBucket.NSNDP
    assert len(STRICT_RULES) == len(DEFAULT_RULES) - 1


def test_custom_rule_order_is_honored():
    rules = (
        ClassifierRule("contains", "green", CategoryBucket.GREEN),
        ClassifierRule("contains", "liberal", CategoryBucket.LIBERAL),
    )
    assert classify("Green Liberal Alliance", rules=rules) is CategoryBucket.GREEN
    assert classify("Green Liberal Alliance") is CategoryBucket.LIBERAL


def test_rules_for_profile():
    assert rules_for_profile("Default") == DEFAULT_RULES
    assert rules_for_profile("strict") == STRICT_RULES
    with pytest.raises(ValueError, match="unknown classifier profile"):
        rules_for_profile("loose")


def test_color_hint_uses_the_same_table():
    assert color_hint("PC") == "#639ee0"
    assert color_hint("CPC") == "#639ee0"
    assert color_hint("LPC") == "red"
    assert color_hint("Liberal") == "red"
    assert color_hint("NSNDP") == "orange"
    assert color_hint("Green") == "green"
    assert color_hint("Atlantica") == "purple"
    assert color_hint("Independent") == ""
