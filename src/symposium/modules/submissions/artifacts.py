"""
Research Artifacts

The fixed set of files a student uploads, with the extensions and size
ceilings each one accepts.
"""

from dataclasses import dataclass
from enum import Enum

MB = 1024 * 1024


class Artifact(str, Enum):
    RESEARCH_PLAN = "research_plan"
    ABSTRACT = "abstract"
    PRESENTATION = "presentation"
    RESEARCH_REPORT = "research_report"
    SLIDESHOW = "slideshow"


@dataclass(frozen=True)
class ArtifactRule:
    extensions: frozenset[str]
    max_bytes: int
    url_field: str

    @property
    def max_mb(self) -> int:
        return self.max_bytes // MB


ARTIFACT_RULES: dict[Artifact, ArtifactRule] = {
    Artifact.RESEARCH_PLAN: ArtifactRule(
        frozenset({"pdf", "doc", "docx"}), 10 * MB, "research_plan_url"
    ),
    Artifact.ABSTRACT: ArtifactRule(frozenset({"pdf", "doc", "docx"}), 5 * MB, "abstract_url"),
    Artifact.PRESENTATION: ArtifactRule(
        frozenset({"pdf", "ppt", "pptx", "key"}), 20 * MB, "presentation_url"
    ),
    Artifact.RESEARCH_REPORT: ArtifactRule(frozenset({"pdf"}), 15 * MB, "research_report_url"),
    Artifact.SLIDESHOW: ArtifactRule(frozenset({"pptx"}), 25 * MB, "slideshow_url"),
}


def file_extension(filename: str | None) -> str:
    """Lower-cased extension without the dot, or an empty string."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].strip().lower()


def storage_name(artifact: Artifact, extension: str) -> str:
    return f"{artifact.value}.{extension}"
