# -*- coding: utf-8 -*-
"""Reconciliation of calculated and declared sex

The calculated karyotype and gender are compared to the sample description by a chain of
rules that is evaluated top to bottom; the first rule that applies decides the chromosome
outcome.  Unless that outcome is already a failure, the gender is cross-checked last: a
mismatch between declared and calculated gender always fails the sample.

Failing is not an error here.  It stops the sample's pipeline until the sample description is
corrected (or the operator overrides the sex chromosomes) and the pipeline is re-launched.
"""

import enum
import typing

import attr

from .models.sample import DeclaredMetadata, Gender

#: Karyotypes that pass without an explicit operator override
REGULAR_KARYOTYPES = ("XX", "XY")


class Outcome(enum.StrEnum):
    ALLOW = "Allow"
    WARN_ALLOW = "WarnAllow"
    FAIL = "Fail"


class MessageLevel(enum.StrEnum):
    INFO = "INFORMA"
    WARNING = "WARNING"
    FAILURE = "FAILURE"
    SUCCESS = "SUCCESS"


@attr.s(frozen=True, auto_attribs=True)
class Message:
    """One line of explanation attached to a decision."""

    level: MessageLevel
    text: str

    def __str__(self):
        return "{} {}".format(self.level, self.text)


def info(text: str) -> Message:
    return Message(MessageLevel.INFO, text)


def warning(text: str) -> Message:
    return Message(MessageLevel.WARNING, text)


def failure(text: str) -> Message:
    return Message(MessageLevel.FAILURE, text)


def success(text: str) -> Message:
    return Message(MessageLevel.SUCCESS, text)


@attr.s(frozen=True, auto_attribs=True)
class Decision:
    """Result of checking one sample, the only thing handed back to the caller."""

    #: Whether the sample may continue through the pipeline.
    outcome: Outcome
    #: Calculated gender, ``None`` if the inputs could not be evaluated.
    calculated_gender: Gender | None = None
    #: Rendered karyotype, ``None`` if the inputs could not be evaluated.
    calculated_karyotype: str | None = None
    #: Explanations, in the order they were produced.
    messages: tuple[Message, ...] = ()
    #: Name of the rule that decided the chromosome outcome.
    rule: str | None = None
    #: Description of the input error that prevented the evaluation, if any.
    input_error: str | None = None

    @property
    def allows_link(self) -> bool:
        return self.outcome != Outcome.FAIL

    @property
    def lines(self) -> list[str]:
        return [str(message) for message in self.messages]

    @classmethod
    def from_input_error(cls, error: Exception) -> "Decision":
        return cls(
            outcome=Outcome.FAIL,
            messages=(failure(str(error)),),
            input_error=str(error),
        )


@attr.s(frozen=True, auto_attribs=True)
class RuleResult:
    outcome: Outcome
    messages: tuple[Message, ...]


#: A rule takes calculated gender, rendered karyotype and declared metadata
Rule = typing.Callable[[Gender, str, DeclaredMetadata], RuleResult | None]


def declared_chromosomes_conflict(gender, karyotype, declared):
    """Declared sex chromosomes differ from the calculated ones: warn, declared ones govern"""
    if declared.sex_chromosomes_specified and declared.sex_chromosomes != karyotype:
        return RuleResult(
            Outcome.WARN_ALLOW,
            (
                warning(
                    "Calculated chromosomal gender {} does not match recorded chromosomal "
                    "gender {}".format(karyotype, declared.sex_chromosomes)
                ),
                warning(
                    "The sample will be processed according to recorded chromosomal gender "
                    "{}".format(declared.sex_chromosomes)
                ),
            ),
        )


def gender_undetermined(gender, karyotype, declared):
    """No X chromosome could be called"""
    if gender == Gender.UNKNOWN:
        return RuleResult(
            Outcome.FAIL,
            (
                failure(
                    "Possibly wrong capture platform specified, poor capture, contamination of "
                    "sample or mosaic aneuploidy"
                ),
            ),
        )


def gender_newly_identified(gender, karyotype, declared):
    """The sample description has no gender yet, stop so that it can be recorded"""
    if declared.gender == Gender.UNKNOWN and declared.gender != gender:
        return RuleResult(
            Outcome.FAIL,
            (
                info("Gender now identified as {}!".format(gender)),
                info(
                    "Please insert this data into the sample description under either Gender "
                    "or Sex Chromosomes, or both."
                ),
                info("You can simply re-launch the pipeline to pick up where you left off."),
            ),
        )


def chromosomes_calculated(gender, karyotype, declared):
    """No sex chromosomes declared and all calculated ones within the tolerance windows"""
    if not declared.sex_chromosomes_specified and karyotype and "E" not in karyotype:
        return RuleResult(
            Outcome.ALLOW,
            (
                info("Chromosomal gender {} calculated!".format(karyotype)),
                info("You can specify this in the sample description."),
            ),
        )


def possible_aneuploidy(gender, karyotype, declared):
    """Anything other than XX or XY needs an explicit override"""
    if karyotype not in REGULAR_KARYOTYPES:
        return RuleResult(
            Outcome.FAIL,
            (
                failure("Possible sex chromosome aneuploidy."),
                failure(
                    "If you wish to proceed, please enter this or your preferred gender into the "
                    "sample description's Sex Chromosomes column, then re-run this pipeline."
                ),
            ),
        )


def declared_chromosomes_match(gender, karyotype, declared):
    if declared.sex_chromosomes == karyotype:
        return RuleResult(
            Outcome.ALLOW,
            (
                success(
                    "Calculated chromosomal gender {} matches recorded chromosomal gender "
                    "{}".format(karyotype, declared.sex_chromosomes)
                ),
            ),
        )


class ReconciliationPolicy:
    """Fixed-priority rule chain followed by the gender cross-check"""

    #: The rules, in order of priority
    rules: tuple[Rule, ...] = (
        declared_chromosomes_conflict,
        gender_undetermined,
        gender_newly_identified,
        chromosomes_calculated,
        possible_aneuploidy,
        declared_chromosomes_match,
    )

    def decide(self, gender: Gender, karyotype: str, declared: DeclaredMetadata) -> Decision:
        outcome, rule_name, messages = Outcome.ALLOW, None, []
        for rule in self.rules:
            result = rule(gender, karyotype, declared)
            if result is not None:
                outcome, rule_name = result.outcome, rule.__name__
                messages.extend(result.messages)
                break

        if outcome != Outcome.FAIL:
            if declared.gender != gender:
                outcome = Outcome.FAIL
                messages.append(
                    failure(
                        "Calculated gender {} conflicts with reported gender {}".format(
                            gender, declared.gender
                        )
                    )
                )
                messages.append(
                    failure(
                        "Please verify your sample authenticity or correct the sample "
                        "description."
                    )
                )
            else:
                messages.append(
                    success("Calculated gender matches reported gender so processing normally!")
                )

        return Decision(
            outcome=outcome,
            calculated_gender=gender,
            calculated_karyotype=karyotype,
            messages=tuple(messages),
            rule=rule_name,
        )


def reconcile(gender: Gender, karyotype: str, declared: DeclaredMetadata) -> Decision:
    """Decide with the default policy"""
    return ReconciliationPolicy().decide(gender, karyotype, declared)
