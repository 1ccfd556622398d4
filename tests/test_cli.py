import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from swaggerdoc.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
CONFIG = FIXTURES / "swaggerdoc.yaml"


class TestCliBuild:
    def test_build_json(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-c", str(CONFIG), "-o", str(output)])

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text(encoding="utf-8"))
        assert doc["openapi"] == "3.0.3"
        assert "/api/ledgers/{id}" in doc["paths"]

    def test_build_yaml_has_no_aliases(self, tmp_path):
        output = tmp_path / "out" / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-c", str(CONFIG), "-o", str(output)])

        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert "&id" not in text
        doc = yaml.safe_load(text)
        assert [t["name"] for t in doc["tags"]] == ["user", "block", "ledger"]

    def test_build_root_argument_overrides_scan_dir(self, tmp_path):
        (tmp_path / "things.py").write_text(
            '"""@controller things"""\n\n\ndef show():\n    """@router get /things"""\n'
        )
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(tmp_path), "-o", str(output)])

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text(encoding="utf-8"))
        assert list(doc["paths"]) == ["/things"]

    def test_missing_schema_reported(self, tmp_path):
        (tmp_path / "things.py").write_text(
            '"""@controller things"""\n\n\ndef show():\n    """@router get /things\n    @response 200 Thing"""\n'
        )
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(tmp_path), "-o", str(tmp_path / "out.json")])

        assert result.exit_code == 1
        assert "get:/things" in result.output
        assert not (tmp_path / "out.json").exists()


class TestCliRoutes:
    def test_routes_table(self):
        runner = CliRunner()
        result = runner.invoke(main, ["routes", "-c", str(CONFIG)])

        assert result.exit_code == 0, result.output
        assert "PUT /api/users/{id} -> " in result.output
        assert "UserController.update [User]" in result.output
        assert "GET /api/block/statistic -> " in result.output
