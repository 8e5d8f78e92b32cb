"""
Diagnostics reporter for the merge engine.

Sections that degrade (malformed input, unexpected errors) are recorded here
as structured warnings and forwarded to the module logger.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionWarning:
    section: str
    message: str


@dataclass
class Diagnostics:
    """Collects per-section warnings for one merge."""
    warnings: List[SectionWarning] = field(default_factory=list)

    def report(self, section: str, message: str, error: Optional[BaseException] = None) -> None:
        if error is not None:
            message = f"{message}: {error}"
        self.warnings.append(SectionWarning(section=section, message=message))
        logger.warning(f"[{section}] {message}")

    def sections(self) -> List[str]:
        """Names of sections that reported at least one warning."""
        seen: List[str] = []
        for warning in self.warnings:
            if warning.section not in seen:
                seen.append(warning.section)
        return seen
