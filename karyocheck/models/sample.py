import enum

from pydantic import ConfigDict, field_validator

from karyocheck.models import EnumField, KaryoModel


class Gender(enum.StrEnum):
    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"

    @classmethod
    def from_code(cls, value: str | None) -> "Gender":
        """Interpret a PED-style sex code (``1``/``2``) or a gender name

        Anything not recognized is ``UNKNOWN``.
        """
        value = (value or "").strip().lower()
        if value in ("1", "m", "male"):
            return cls.MALE
        elif value in ("2", "f", "female"):
            return cls.FEMALE
        else:
            return cls.UNKNOWN


class DeclaredMetadata(KaryoModel):
    """Gender and sex chromosomes as recorded in the sample description"""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    gender: Gender = EnumField(Gender, Gender.UNKNOWN)
    """Recorded gender"""

    sex_chromosomes: str | None = None
    """Recorded sex chromosomes, e.g. ``XX`` or ``XXY``; ``None`` if not specified"""

    @field_validator("gender", mode="before")
    @classmethod
    def _parse_gender(cls, value):
        if isinstance(value, Gender):
            return value
        return Gender.from_code(value)

    @field_validator("sex_chromosomes", mode="before")
    @classmethod
    def _blank_is_unspecified(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @property
    def sex_chromosomes_specified(self) -> bool:
        return self.sex_chromosomes is not None

    def describe_sex_chromosomes(self) -> str:
        return self.sex_chromosomes if self.sex_chromosomes_specified else "Unspecified"
