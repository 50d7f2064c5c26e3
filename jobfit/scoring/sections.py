from __future__ import annotations

from dataclasses import dataclass

from jobfit.core.scoring_config import get_lexicon


@dataclass(frozen=True)
class JDSections:
    requirements: str = ""
    responsibilities: str = ""
    preferred: str = ""
    other: str = ""

    def items(self) -> list[tuple[str, str]]:
        return [
            ("requirements", self.requirements),
            ("responsibilities", self.responsibilities),
            ("preferred", self.preferred),
            ("other", self.other),
        ]


def classify_heading(line: str) -> str | None:
    """Section a heading line opens, or None for body text."""
    for section, pattern in get_lexicon().section_headings:
        if pattern.search(line):
            return section
    return None


def split_jd_sections(jd_text: str) -> JDSections:
    buffers: dict[str, list[str]] = {
        "requirements": [],
        "responsibilities": [],
        "preferred": [],
        "other": [],
    }
    current = "other"

    for raw_line in jd_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        heading = classify_heading(line)
        if heading is not None:
            current = heading
            continue
        buffers[current].append(f" {line}")

    return JDSections(**{name: "".join(parts) for name, parts in buffers.items()})
