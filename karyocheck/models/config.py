import enum

from karyocheck.models import EnumField, KaryoModel
from karyocheck.models.platform import PlatformEntry, PlatformThresholds


class CoverageFormat(enum.StrEnum):
    GATK_DOC = "gatk_doc"
    """GATK DepthOfCoverage ``.sample_summary`` files"""

    MOSDEPTH = "mosdepth"
    """mosdepth ``.mosdepth.summary.txt`` files"""


class KaryotypeCheck(KaryoModel):
    coverage_format: CoverageFormat = EnumField(CoverageFormat, CoverageFormat.GATK_DOC)
    """Format of the depth of coverage summaries for the X, Y and autosomal loci"""

    report_file_name: str = "MergeReport.txt"
    """Name of the report file appended to in the individual's directory"""

    link_overwrite: bool = False
    """Replace existing link targets that are not linked to the source BAM/BAI"""

    platforms: list[PlatformEntry] = []
    """Calibration of the capture platforms"""

    def find_platform(self, platform: str) -> PlatformThresholds | None:
        """Return the thresholds of ``platform``, exact name matches take precedence"""
        for entry in self.platforms:
            if entry.name == platform:
                return entry.thresholds()
        for entry in self.platforms:
            if entry.matches(platform):
                return entry.thresholds()
        return None
