"""Startup validation for a frozen site.

Reports the problems that would otherwise only show up while serving:

- route collisions (two content files on one URL path)
- routes whose ``settings.template`` has no partial
- a missing root partial while templated routes exist

Usage::

    result = check_site(site.state)
    print(result.summary())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lectern.site import SiteState


class Severity(Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class SiteIssue:
    """A single problem found while checking a site."""

    severity: Severity
    category: str
    message: str
    route: str | None = None
    details: str | None = None


@dataclass(slots=True)
class CheckResult:
    """Result of a site check."""

    issues: list[SiteIssue] = field(default_factory=list)
    routes_checked: int = 0
    modules_checked: int = 0

    @property
    def errors(self) -> list[SiteIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[SiteIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"Checked {self.routes_checked} routes and {self.modules_checked} modules."]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            prefix = issue.severity.value.upper()
            loc = f" ({issue.route})" if issue.route else ""
            lines.append(f"  [{prefix}] {issue.message}{loc}")
            if issue.details:
                lines.append(f"           {issue.details}")
        return "\n".join(lines)


def check_site(state: SiteState) -> CheckResult:
    """Validate a frozen site's routes against its module registry."""
    routes = state.routes
    registry = state.registry
    root_module = state.config.root_module
    result = CheckResult(routes_checked=len(routes), modules_checked=len(registry.names()))

    for collision in routes.collisions:
        result.issues.append(
            SiteIssue(
                severity=Severity.WARNING,
                category="collision",
                message=f"{collision.winner} replaces {collision.replaced}",
                route=collision.path,
            )
        )

    templated = [path for path in routes if routes.template(path) is not None]

    if templated and not registry.has_partial(root_module):
        result.issues.append(
            SiteIssue(
                severity=Severity.ERROR,
                category="root",
                message=f"Root partial {root_module!r} is not registered",
                details=f"{len(templated)} templated route(s) will render the missing-module placeholder",
            )
        )

    for path in templated:
        template = routes.template(path)
        if template is not None and not registry.has_partial(template):
            result.issues.append(
                SiteIssue(
                    severity=Severity.ERROR,
                    category="template",
                    message=f"Template {template!r} has no partial",
                    route=path,
                    details=f"declared in {routes.source(path)}",
                )
            )

    return result
