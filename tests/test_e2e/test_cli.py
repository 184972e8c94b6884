"""End-to-end tests for the command line entry point."""

import json

from i18n_audit.constants import REPORT_FILENAME
from i18n_audit.main import run


def _project(root, source: str, catalog: dict) -> None:
    page = root / "src" / "app" / "page.tsx"
    page.parent.mkdir(parents=True)
    page.write_text(source, encoding="utf-8")
    messages = root / "messages" / "en"
    messages.mkdir(parents=True)
    (messages / "critical.json").write_text(json.dumps(catalog), encoding="utf-8")


class TestCli:
    """Test exit codes and the written report."""

    def test_clean_project_passes(self, tmp_path):
        """A project whose keys all exist exits 0 and writes the report."""
        _project(
            tmp_path,
            "export default function Page() {\n"
            "  const t = useTranslations('Header');\n"
            "  return <h1>{t('title')}</h1>;\n"
            "}\n",
            {"Header": {"title": "Welcome"}},
        )

        exit_code = run([str(tmp_path), "--locale", "en"])

        assert exit_code == 0
        report = json.loads((tmp_path / "reports" / REPORT_FILENAME).read_text(encoding="utf-8"))
        assert report["translationKeys"] == ["Header.title"]
        assert report["keyUsages"]["Header.title"] == [
            {"file": "src/app/page.tsx", "line": 3, "column": 14}
        ]

    def test_missing_key_fails(self, tmp_path):
        """A missing key makes the run exit non-zero."""
        _project(tmp_path, "t('Header.subtitle');\n", {"Header": {"title": "Welcome"}})

        exit_code = run([str(tmp_path), "--locale", "en", "--output", "out"])

        assert exit_code == 1
        report = json.loads((tmp_path / "out" / REPORT_FILENAME).read_text(encoding="utf-8"))
        assert report["analysis"]["missingKeys"] == ["Header.subtitle"]

    def test_allow_option(self, tmp_path):
        """--allow accepts an ambiguous short key."""
        _project(tmp_path, "t('title');\n", {"A": {"title": "a"}, "B": {"title": "b"}})

        assert run([str(tmp_path), "--locale", "en"]) == 1
        assert run([str(tmp_path), "--locale", "en", "--allow", "title"]) == 0

    def test_json_output(self, tmp_path, capsys):
        """--json prints the report instead of the summary table."""
        _project(tmp_path, "t('Header.title');\n", {"Header": {"title": "Welcome"}})

        assert run([str(tmp_path), "--locale", "en", "--json"]) == 0
        assert '"translationKeys"' in capsys.readouterr().out
