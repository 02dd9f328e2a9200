"""Tests for refdocs import command."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from factories import doc, function, hook, klass, method, parsed_file, tag
from refdocs.cli.main import cli

runner = CliRunner()


@pytest.fixture
def export(tmp_path: Path) -> Path:
    """A parser export with one class, one method and one function."""
    path = tmp_path / "export.json"
    tree = [
        parsed_file(
            "wp-includes/post.php",
            file=doc("Post API.", tags=[tag("package", "WordPress")]),
            functions=[function("get_post", hooks=[hook("get_post", "Filters the post.", hook_type="filter")])],
            classes=[klass("WP_Post", methods=[method("get_instance", static=True)])],
        )
    ]
    path.write_text(json.dumps(tree))
    return path


@pytest.fixture
def admin(root: Path) -> str:
    result = runner.invoke(cli, ["user", "add", "admin", "--root", str(root)])
    assert result.exit_code == 0, result.output
    return "admin"


class TestImportCommand:
    """refdocs import command tests."""

    def test_given_export_when_import_json_then_reports_counts(
        self, root: Path, export: Path, admin: str
    ) -> None:
        """JSON output carries the run counters."""
        # When
        result = runner.invoke(
            cli, ["import", str(export), "--user", admin, "--root", str(root), "--quick", "--json"]
        )

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["files"] == 1
        assert data["created"] == 4
        assert data["imported"] == 4
        assert data["errors"] == []
        assert (root / ".refdocs" / "refdocs.db").exists()

    def test_given_second_run_when_import_then_nothing_created(
        self, root: Path, export: Path, admin: str
    ) -> None:
        """Re-importing the same export leaves every item unchanged."""
        args = ["import", str(export), "--user", admin, "--root", str(root), "--quick", "--json"]
        runner.invoke(cli, args)

        result = runner.invoke(cli, args)

        data = json.loads(result.stdout)
        assert data["created"] == 0
        assert data["unchanged"] == 4

    def test_given_export_when_import_then_prints_summary(
        self, root: Path, export: Path, admin: str
    ) -> None:
        """Console output is a one-line summary."""
        result = runner.invoke(cli, ["import", str(export), "--user", admin, "--root", str(root)])

        assert result.exit_code == 0, result.output
        assert "Imported 1 file: 4 created" in result.output

    def test_given_no_user_when_import_then_fails(self, root: Path, export: Path) -> None:
        """The import refuses to run anonymously."""
        result = runner.invoke(cli, ["import", str(export), "--root", str(root)])

        assert result.exit_code == 1
        assert "Please specify a valid user: --user=<login>" in result.output

    def test_given_unknown_user_when_import_then_fails(
        self, root: Path, export: Path, admin: str
    ) -> None:
        result = runner.invoke(cli, ["import", str(export), "--user", "ghost", "--root", str(root)])

        assert result.exit_code == 1
        assert "valid user" in result.output

    def test_given_missing_file_when_import_then_fails(self, root: Path, admin: str) -> None:
        result = runner.invoke(cli, ["import", str(root / "nope.json"), "--user", admin, "--root", str(root)])

        assert result.exit_code == 1
        assert "Can't read" in result.output

    def test_given_internal_entity_when_flag_then_imported(
        self, root: Path, tmp_path: Path, admin: str
    ) -> None:
        """--import-internal brings in @internal entities."""
        export = tmp_path / "internal.json"
        export.write_text(
            json.dumps([parsed_file(functions=[function("_helper", doc=doc("Helper.", tags=[tag("internal")]))])])
        )
        base = ["import", str(export), "--user", admin, "--root", str(root), "--json", "--quick"]

        without = json.loads(runner.invoke(cli, base).stdout)
        with_flag = json.loads(runner.invoke(cli, [*base, "--import-internal"]).stdout)

        assert without["imported"] == 0
        assert without["skipped"] == 1
        assert with_flag["created"] == 1

    def test_given_db_option_when_import_then_uses_that_file(
        self, root: Path, tmp_path: Path, export: Path
    ) -> None:
        db = tmp_path / "custom" / "docs.db"
        runner.invoke(cli, ["user", "add", "editor", "--db", str(db), "--root", str(root)])

        result = runner.invoke(
            cli, ["import", str(export), "--user", "editor", "--db", str(db), "--root", str(root), "--quick"]
        )

        assert result.exit_code == 0, result.output
        assert db.exists()
        assert not (root / ".refdocs" / "refdocs.db").exists()

    def test_given_logging_section_when_import_then_events_written_to_file(
        self, root: Path, export: Path, admin: str, tmp_path: Path
    ) -> None:
        """The repo config's logging outputs receive the run's events."""
        # Given
        log_file = tmp_path / "logs" / "import.log"
        (root / ".refdocs" / "config.yaml").write_text(
            f"logging:\n  level: INFO\n  outputs:\n    - format: json\n      destination: {log_file}\n"
        )

        # When
        result = runner.invoke(
            cli, ["import", str(export), "--user", admin, "--root", str(root), "--quick", "--json"]
        )

        # Then
        assert result.exit_code == 0, result.output
        events = [json.loads(line) for line in log_file.read_text().splitlines()]
        completed = [e for e in events if e["event"] == "import_completed"]
        assert len(completed) == 1
        assert completed[0]["created"] == 4
        assert "run_id" in completed[0]
        assert json.loads(result.stdout)["created"] == 4
