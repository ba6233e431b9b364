# -*- coding: utf-8 -*-
"""Tests for ``karyocheck.reconcile``"""

import pytest

from karyocheck.models.sample import DeclaredMetadata, Gender
from karyocheck.reconcile import (
    Decision,
    Message,
    MessageLevel,
    Outcome,
    ReconciliationPolicy,
    reconcile,
)


def levels(decision):
    return [message.level for message in decision.messages]


def test_message_str():
    assert str(Message(MessageLevel.WARNING, "careful")) == "WARNING careful"
    assert str(Message(MessageLevel.INFO, "note")) == "INFORMA note"


def test_declared_gender_mismatch_fails():
    decision = reconcile(Gender.MALE, "XY", DeclaredMetadata(gender="Female"))
    assert decision.outcome == Outcome.FAIL
    assert decision.rule == "chromosomes_calculated"
    assert decision.calculated_gender == Gender.MALE
    assert decision.calculated_karyotype == "XY"
    assert decision.lines[-2:] == [
        "FAILURE Calculated gender Male conflicts with reported gender Female",
        "FAILURE Please verify your sample authenticity or correct the sample description.",
    ]
    assert not decision.allows_link


def test_declared_chromosomes_match(female_xx):
    decision = reconcile(Gender.FEMALE, "XX", female_xx)
    assert decision.outcome == Outcome.ALLOW
    assert decision.rule == "declared_chromosomes_match"
    assert decision.lines == [
        "SUCCESS Calculated chromosomal gender XX matches recorded chromosomal gender XX",
        "SUCCESS Calculated gender matches reported gender so processing normally!",
    ]
    assert decision.allows_link


def test_declared_chromosomes_conflict_warns():
    declared = DeclaredMetadata(gender="1", sex_chromosomes="XY")
    decision = reconcile(Gender.MALE, "XXY", declared)
    assert decision.outcome == Outcome.WARN_ALLOW
    assert decision.rule == "declared_chromosomes_conflict"
    assert levels(decision) == [MessageLevel.WARNING, MessageLevel.WARNING, MessageLevel.SUCCESS]
    assert decision.lines[0] == (
        "WARNING Calculated chromosomal gender XXY does not match recorded chromosomal gender XY"
    )
    assert decision.allows_link


def test_declared_chromosomes_conflict_with_gender_mismatch_fails():
    declared = DeclaredMetadata(gender="2", sex_chromosomes="XX")
    decision = reconcile(Gender.MALE, "XY", declared)
    assert decision.outcome == Outcome.FAIL
    assert decision.rule == "declared_chromosomes_conflict"
    assert levels(decision) == [
        MessageLevel.WARNING,
        MessageLevel.WARNING,
        MessageLevel.FAILURE,
        MessageLevel.FAILURE,
    ]


def test_gender_undetermined_fails():
    decision = reconcile(Gender.UNKNOWN, "0", DeclaredMetadata(gender="2"))
    assert decision.outcome == Outcome.FAIL
    assert decision.rule == "gender_undetermined"
    # No gender cross-check after a failing rule
    assert levels(decision) == [MessageLevel.FAILURE]
    assert "wrong capture platform" in decision.lines[0]


def test_declared_chromosomes_override_undetermined_gender_until_cross_check():
    declared = DeclaredMetadata(gender="2", sex_chromosomes="XX")
    decision = reconcile(Gender.UNKNOWN, "EX", declared)
    assert decision.rule == "declared_chromosomes_conflict"
    assert decision.outcome == Outcome.FAIL
    assert decision.lines[-2] == (
        "FAILURE Calculated gender Unknown conflicts with reported gender Female"
    )


def test_gender_newly_identified_fails():
    decision = reconcile(Gender.FEMALE, "XX", DeclaredMetadata())
    assert decision.outcome == Outcome.FAIL
    assert decision.rule == "gender_newly_identified"
    assert levels(decision) == [MessageLevel.INFO] * 3
    assert decision.lines[0] == "INFORMA Gender now identified as Female!"


def test_chromosomes_calculated_allows():
    decision = reconcile(Gender.MALE, "XY", DeclaredMetadata(gender="Male"))
    assert decision.outcome == Outcome.ALLOW
    assert decision.rule == "chromosomes_calculated"
    assert decision.lines == [
        "INFORMA Chromosomal gender XY calculated!",
        "INFORMA You can specify this in the sample description.",
        "SUCCESS Calculated gender matches reported gender so processing normally!",
    ]


def test_chromosomes_calculated_takes_precedence_over_aneuploidy():
    decision = reconcile(Gender.MALE, "XXY", DeclaredMetadata(gender="m"))
    assert decision.outcome == Outcome.ALLOW
    assert decision.rule == "chromosomes_calculated"


@pytest.mark.parametrize("karyotype", ["EXY", "XEYY"])
def test_possible_aneuploidy_with_excess_fails(karyotype):
    decision = reconcile(Gender.MALE, karyotype, DeclaredMetadata(gender="1"))
    assert decision.outcome == Outcome.FAIL
    assert decision.rule == "possible_aneuploidy"
    assert decision.lines[0] == "FAILURE Possible sex chromosome aneuploidy."


def test_possible_aneuploidy_even_if_declared():
    declared = DeclaredMetadata(gender="1", sex_chromosomes="XXY")
    decision = reconcile(Gender.MALE, "XXY", declared)
    assert decision.outcome == Outcome.FAIL
    assert decision.rule == "possible_aneuploidy"


def test_no_rule_applies_defaults_to_allow():
    class NoRules(ReconciliationPolicy):
        rules = ()

    decision = NoRules().decide(Gender.FEMALE, "XX", DeclaredMetadata(gender="f"))
    assert decision.outcome == Outcome.ALLOW
    assert decision.rule is None
    assert levels(decision) == [MessageLevel.SUCCESS]


def test_decision_from_input_error():
    decision = Decision.from_input_error(FileNotFoundError("X coverage file missing"))
    assert decision.outcome == Outcome.FAIL
    assert decision.calculated_gender is None
    assert decision.input_error == "X coverage file missing"
    assert decision.lines == ["FAILURE X coverage file missing"]
