from decimal import Decimal
from fnmatch import fnmatch
from typing import Annotated

from pydantic import ConfigDict, Field

from karyocheck.models import KaryoModel


class PlatformThresholds(KaryoModel):
    """
    Calibration of one capture platform: the X/autosome and Y/autosome coverage ratio that a
    single copy of the chromosome contributes, with the tolerated deviation around each
    integer copy number.
    """

    model_config = ConfigDict(frozen=True)

    ratio_mean_x: Annotated[float, Field(gt=0, examples=[0.5])] = 0.5
    """X/autosome coverage ratio of a single X chromosome"""

    tolerance_x: Annotated[float, Field(ge=0, examples=[0.15])] = 0.15
    """Tolerated deviation of the X copy number estimate from an integer"""

    ratio_mean_y: Annotated[float, Field(gt=0, examples=[0.5])] = 0.5
    """Y/autosome coverage ratio of a single Y chromosome"""

    tolerance_y: Annotated[float, Field(ge=0, examples=[0.15])] = 0.15
    """Tolerated deviation of the Y copy number estimate from an integer"""

    @staticmethod
    def _decimal(value: float) -> Decimal:
        # str() gives the shortest repr, so 0.15 becomes Decimal("0.15") and not the binary value
        return Decimal(str(value))

    @property
    def mean_x(self) -> Decimal:
        return self._decimal(self.ratio_mean_x)

    @property
    def mean_y(self) -> Decimal:
        return self._decimal(self.ratio_mean_y)

    @property
    def var_x(self) -> Decimal:
        return self._decimal(self.tolerance_x)

    @property
    def var_y(self) -> Decimal:
        return self._decimal(self.tolerance_y)


class PlatformEntry(PlatformThresholds):
    """
    Calibration for a named capture platform.  The entry is selected either by its exact
    ``name`` or, failing that, by matching the platform identifier against ``pattern``.

      - name: SureSelect_V5
        pattern: "SureSelect*V5*"
        ratio_mean_x: 0.5
        tolerance_x: 0.15
        ratio_mean_y: 0.5
        tolerance_y: 0.15
    """

    name: Annotated[str, Field(examples=["SureSelect_V5"])]

    pattern: Annotated[str | None, Field(examples=["SureSelect*V5*"])] = None
    """Shell-style pattern matched against the platform identifier"""

    def matches(self, platform: str) -> bool:
        if platform == self.name:
            return True
        return self.pattern is not None and fnmatch(platform, self.pattern)

    def thresholds(self) -> PlatformThresholds:
        return PlatformThresholds(
            ratio_mean_x=self.ratio_mean_x,
            tolerance_x=self.tolerance_x,
            ratio_mean_y=self.ratio_mean_y,
            tolerance_y=self.tolerance_y,
        )
