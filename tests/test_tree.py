import logging
from pathlib import Path

import pytest

from swaggerdoc.config import SwaggerDocConfig
from swaggerdoc.errors import DuplicateRouteError, MissingSchemaError
from swaggerdoc.generator.tree import check_operation_ids, scan_tree

FIXTURES = Path(__file__).parent / "fixtures"
CONTROLLERS = FIXTURES / "app" / "controller"
SCHEMAS = {"Ledger", "CreateLedger", "User"}


def _controller(route: str, method: str = "get", tag: str = "things", name: str = "handler") -> str:
    return (
        f'"""@controller {tag}"""\n\n\n'
        f"def {name}():\n"
        f'    """@router {method} {route}"""\n'
    )


class TestScanFixtureTree:
    def test_tags_in_traversal_order(self):
        scan = scan_tree(CONTROLLERS, SCHEMAS, SwaggerDocConfig())
        assert [t["name"] for t in scan.tags] == ["user", "block", "ledger"]

    def test_paths_from_every_controller(self):
        scan = scan_tree(CONTROLLERS, SCHEMAS, SwaggerDocConfig())
        assert set(scan.paths) == {
            "/api/users",
            "/api/users/{id}",
            "/api/block/statistic",
            "/api/ledgers/",
            "/api/ledgers/{id}",
        }

    def test_non_controller_excluded(self):
        scan = scan_tree(CONTROLLERS, SCHEMAS, SwaggerDocConfig())
        assert "/api/never" not in scan.paths
        assert all("helpers" not in str(b.file_path) for b in scan.bindings)

    def test_ts_skipped_when_js_sibling_exists(self):
        scan = scan_tree(CONTROLLERS, SCHEMAS, SwaggerDocConfig())
        files = [b.file_path.name for b in scan.bindings]
        assert "block.js" in files
        assert "block.ts" not in files

    def test_extension_filter(self):
        scan = scan_tree(CONTROLLERS, SCHEMAS, SwaggerDocConfig(extensions=[".py"]))
        assert [t["name"] for t in scan.tags] == ["user", "ledger"]

    def test_missing_schema_aborts(self):
        with pytest.raises(MissingSchemaError):
            scan_tree(CONTROLLERS, {"Ledger"}, SwaggerDocConfig())


class TestMerge:
    def test_same_route_from_two_files_merges_methods(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "read.py").write_text(_controller("/things", "get", "read"))
        (tmp_path / "write.py").write_text(_controller("/things", "post", "write"))
        scan = scan_tree(tmp_path, set(), SwaggerDocConfig())
        assert set(scan.paths["/things"]) == {"get", "post"}
        assert len(scan.bindings) == 2

    def test_duplicate_across_files_warns(self, tmp_path, caplog):
        (tmp_path / "a.py").write_text(_controller("/things", tag="a"))
        (tmp_path / "b.py").write_text(_controller("/things", tag="b"))
        with caplog.at_level(logging.WARNING):
            scan = scan_tree(tmp_path, set(), SwaggerDocConfig())
        assert scan.paths["/things"]["get"]["tags"] == ["b"]
        assert "declared more than once" in caplog.text

    def test_duplicate_across_files_error_policy(self, tmp_path):
        (tmp_path / "a.py").write_text(_controller("/things", tag="a"))
        (tmp_path / "b.py").write_text(_controller("/things", tag="b"))
        with pytest.raises(DuplicateRouteError):
            scan_tree(tmp_path, set(), SwaggerDocConfig(on_duplicate_route="error"))

    def test_tag_collision_across_directories(self, tmp_path):
        (tmp_path / "v1").mkdir()
        (tmp_path / "v2").mkdir()
        (tmp_path / "v1" / "users.py").write_text(_controller("/v1/users", tag="users"))
        (tmp_path / "v2" / "users.py").write_text(_controller("/v2/users", tag="users"))
        scan = scan_tree(tmp_path, set(), SwaggerDocConfig())
        assert [t["name"] for t in scan.tags] == ["users", "users_1"]
        assert scan.paths["/v2/users"]["get"]["tags"] == ["users_1"]

    def test_hidden_and_cache_dirs_skipped(self, tmp_path):
        (tmp_path / ".hidden").mkdir()
        (tmp_path / "__pycache__").mkdir()
        (tmp_path / ".hidden" / "x.py").write_text(_controller("/hidden"))
        (tmp_path / "__pycache__" / "y.py").write_text(_controller("/cached"))
        scan = scan_tree(tmp_path, set(), SwaggerDocConfig())
        assert scan.paths == {}

    def test_unreadable_directory_propagates(self, tmp_path):
        with pytest.raises(OSError):
            scan_tree(tmp_path / "missing", set(), SwaggerDocConfig())


class TestOperationIds:
    def test_shared_operation_id_is_logged(self, caplog):
        paths = {
            "/a/{id}": {"get": {"operationId": "getAById"}},
            "/a/{key}": {"get": {"operationId": "getAById"}},
        }
        with caplog.at_level(logging.WARNING):
            check_operation_ids(paths)
        assert "getAById" in caplog.text
