"""
Corpus validation - Check a diagram corpus for link and tier problems.

The layout core tolerates all of these; validation exists so callers can
show users why a diagram is missing from a layout or a link draws no edge.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from .analysis import resolve_link
from .models import TIER_ORDER

if TYPE_CHECKING:
    from .models import DiagramMetadata


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Breaks a core assumption, must be fixed
    WARNING = "warning"  # Diagram or link will be left out of some output
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found in a corpus."""
    severity: IssueSeverity
    message: str
    path: str | None = None
    link: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message,
        }
        if self.path:
            result["path"] = self.path
        if self.link:
            result["link"] = self.link
        return result


def validate_corpus(diagrams: Sequence["DiagramMetadata"]) -> list[ValidationIssue]:
    """
    Validate a diagram corpus and return a list of issues.

    Checks for:
    - Empty corpus - INFO
    - Duplicate paths - ERROR
    - Unrecognized diagram type (dropped by tiered layouts) - WARNING
    - Links that resolve to no diagram - WARNING
    - Links that only resolve by basename - INFO
    - Self-referencing links - WARNING

    Args:
        diagrams: The metadata set to validate

    Returns:
        List of ValidationIssue objects
    """
    issues: list[ValidationIssue] = []

    if not diagrams:
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Corpus has no diagrams",
        ))
        return issues

    paths = [d.path for d in diagrams]

    for path, count in Counter(paths).items():
        if count > 1:
            issues.append(ValidationIssue(
                severity=IssueSeverity.ERROR,
                message=f"Path appears {count} times",
                path=path,
            ))

    for diagram in diagrams:
        if diagram.diagram_type not in TIER_ORDER:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=(
                    f"Unrecognized diagram type '{diagram.diagram_type}'; "
                    "not shown in hierarchical or circular layouts"
                ),
                path=diagram.path,
            ))

        for link in diagram.linked_diagram_paths:
            target = resolve_link(link, paths)
            if target is None:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message="Link does not match any diagram",
                    path=diagram.path,
                    link=link,
                ))
            elif target == diagram.path:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message="Diagram links to itself",
                    path=diagram.path,
                    link=link,
                ))
            elif target != link:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.INFO,
                    message=f"Link matched by file name to {target}",
                    path=diagram.path,
                    link=link,
                ))

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """
    Create a summary of validation issues.

    Args:
        issues: List of validation issues

    Returns:
        Dictionary with counts by severity
    """
    errors = len([i for i in issues if i.severity == IssueSeverity.ERROR])
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": len([i for i in issues if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in issues if i.severity == IssueSeverity.INFO]),
        "valid": errors == 0,
    }
