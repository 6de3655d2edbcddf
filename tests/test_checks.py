"""Tests for lectern.checks: startup validation of routes against modules."""

from collections.abc import Callable

from lectern.checks import CheckResult, Severity, SiteIssue, check_site
from lectern.site import Site


class TestCheckSite:
    def test_clean(self, make_site: Callable[..., Site], blog_files: dict[str, str]) -> None:
        result = check_site(make_site(blog_files).state)
        assert result.ok
        assert result.issues == []
        assert result.routes_checked == 4
        assert "No issues found." in result.summary()

    def test_missing_template_partial(self, make_site: Callable[..., Site]) -> None:
        site = make_site(
            {
                "content/index.yaml": "settings:\n  template: teaser\n",
                "modules/core.html": "",
            }
        )
        result = check_site(site.state)
        assert not result.ok
        [issue] = result.errors
        assert issue.category == "template"
        assert issue.route == "/"

    def test_missing_root_partial(self, make_site: Callable[..., Site]) -> None:
        site = make_site(
            {
                "content/index.yaml": "settings:\n  template: article\n",
                "modules/article.html": "",
            }
        )
        result = check_site(site.state)
        assert [issue.category for issue in result.errors] == ["root"]

    def test_untemplated_site_needs_no_root(self, make_site: Callable[..., Site]) -> None:
        result = check_site(make_site({"content/index.yaml": "a: 1\n"}).state)
        assert result.ok

    def test_collision_is_warning(self, make_site: Callable[..., Site]) -> None:
        site = make_site({"content/a.txt": "x: 1\n", "content/a.yaml": "x: 2\n"})
        result = check_site(site.state)
        assert result.ok
        [warning] = result.warnings
        assert warning.category == "collision"
        assert warning.route == "/a"
        assert "1 warning(s)" in result.summary()


class TestCheckResult:
    def test_summary_lists_issues(self) -> None:
        result = CheckResult(
            issues=[
                SiteIssue(Severity.ERROR, "template", "Template 'x' has no partial", "/p", "declared in p.yaml"),
            ],
            routes_checked=1,
            modules_checked=0,
        )
        summary = result.summary()
        assert "1 error(s), 0 warning(s)." in summary
        assert "[ERROR] Template 'x' has no partial (/p)" in summary
        assert "declared in p.yaml" in summary
