"""
Tests for main.py CLI functionality.
"""
import json
import os
import pytest
from unittest.mock import patch

from sqompare.exceptions import SourceError
from sqompare.main import build_arg_parser, main, read_sql_source
from sqompare.parsers.mysql import parse


SOURCE_SQL = """
CREATE TABLE users (
  id INT NOT NULL AUTO_INCREMENT,
  name VARCHAR(50) NULL COLLATE utf8mb4_bin,
  PRIMARY KEY (id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;
"""

TARGET_SQL = """
CREATE TABLE users (
  id INT NOT NULL AUTO_INCREMENT,
  PRIMARY KEY (id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;
"""


@pytest.fixture
def dumps(tmp_path):
    source = tmp_path / "source.sql"
    target = tmp_path / "target.sql"
    source.write_text(SOURCE_SQL)
    target.write_text(TARGET_SQL)
    return str(source), str(target)


class TestReadSQLSource:
    """Test reading SQL from files and directories."""

    def test_read_file(self, tmp_path):
        path = tmp_path / "a.sql"
        path.write_text("CREATE TABLE a (id INT);")
        assert read_sql_source(str(path)) == "CREATE TABLE a (id INT);"

    def test_read_directory_sorted_recursive(self, tmp_path):
        (tmp_path / "tables").mkdir()
        (tmp_path / "tables" / "b.sql").write_text("B;")
        (tmp_path / "a.sql").write_text("A;")
        (tmp_path / "notes.txt").write_text("ignored")
        assert read_sql_source(str(tmp_path)) == "A;\nB;"

    def test_empty_directory(self, tmp_path):
        with pytest.raises(SourceError, match="No .sql files found"):
            read_sql_source(str(tmp_path))

    def test_missing_path(self, tmp_path):
        with pytest.raises(SourceError, match="Path not found"):
            read_sql_source(str(tmp_path / "missing.sql"))

    def test_binary_file(self, tmp_path):
        path = tmp_path / "bin.sql"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(SourceError, match="not valid text"):
            read_sql_source(str(path))

    def test_byte_order_mark_stripped(self, tmp_path):
        path = tmp_path / "bom.sql"
        path.write_bytes("CREATE TABLE t (id INT);".encode("utf-8-sig"))
        content = read_sql_source(str(path))
        assert content == "CREATE TABLE t (id INT);"
        assert list(parse(content, "A")) == ["t"]

    def test_byte_order_mark_in_every_directory_file(self, tmp_path):
        (tmp_path / "a.sql").write_bytes("CREATE TABLE a (id INT);".encode("utf-8-sig"))
        (tmp_path / "b.sql").write_bytes("CREATE TABLE b (id INT);".encode("utf-8-sig"))
        assert list(parse(read_sql_source(str(tmp_path)), "A")) == ["a", "b"]


class TestArgParser:
    def test_defaults(self):
        args = build_arg_parser().parse_args(['compare', '--source', 'a', '--target', 'b'])
        assert args.source_label == 'Database 1'
        assert args.target_label == 'Database 2'
        assert args.no_collation is False
        assert args.verbose == 0

    def test_invalid_command(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args(['diff', '--source', 'a', '--target', 'b'])


class TestMain:
    """Test the main entry point end to end."""

    def test_plan(self, dumps, capsys):
        source, target = dumps
        main(['compare', '--source', source, '--target', target, '--plan', '--no-color'])
        out = capsys.readouterr().out
        assert "Comparison Plan (Database 1 vs Database 2):" in out
        assert "+ Add Column: users.name (VARCHAR(50)) missing from Database 2" in out

    def test_custom_labels(self, dumps, capsys):
        source, target = dumps
        main(['compare', '--source', source, '--target', target, '--plan', '--no-color',
              '--source-label', 'prod', '--target-label', 'staging'])
        out = capsys.readouterr().out
        assert "Comparison Plan (prod vs staging):" in out
        assert "missing from staging" in out

    def test_sql_out(self, dumps, tmp_path, capsys):
        source, target = dumps
        out_file = tmp_path / "migration.sql"
        main(['compare', '--source', source, '--target', target, '--sql-out', str(out_file)])
        content = out_file.read_text()
        assert "ALTER TABLE `users`\n  ADD COLUMN `name` VARCHAR(50) COLLATE utf8mb4_bin NULL AFTER `id`;" in content
        assert "Migration SQL saved to" in capsys.readouterr().out

    def test_sql_out_without_collation(self, dumps, tmp_path):
        source, target = dumps
        out_file = tmp_path / "migration.sql"
        main(['compare', '--source', source, '--target', target, '--sql-out', str(out_file), '--no-collation'])
        content = out_file.read_text()
        assert "ADD COLUMN `name` VARCHAR(50) NULL AFTER `id`;" in content
        assert "COLLATE" not in content

    def test_json_out(self, dumps, tmp_path):
        source, target = dumps
        out_file = tmp_path / "result.json"
        main(['compare', '--source', source, '--target', target, '--json-out', str(out_file)])
        data = json.loads(out_file.read_text())
        assert data['missing_columns'][0]['column_name'] == 'name'
        assert data['matching_tables'] == ['users']

    def test_report_out(self, dumps, tmp_path):
        source, target = dumps
        out_file = tmp_path / "report.sql"
        main(['compare', '--source', source, '--target', target, '--report-out', str(out_file)])
        report = out_file.read_text()
        assert report.startswith("-- SQompare Database Structure Comparison Report")
        assert "-- Database 1: source.sql" in report
        assert "-- Database 2: target.sql" in report

    def test_no_output_action(self, dumps, capsys):
        source, target = dumps
        main(['compare', '--source', source, '--target', target])
        assert "No output action specified" in capsys.readouterr().out

    def test_directory_source(self, tmp_path, capsys):
        schema_dir = tmp_path / "schema"
        (schema_dir / "tables").mkdir(parents=True)
        (schema_dir / "tables" / "users.sql").write_text("CREATE TABLE users (id INT, name VARCHAR(50));")
        (schema_dir / "tables" / "orders.sql").write_text("CREATE TABLE orders (id INT, user_id INT);")
        target = tmp_path / "target.sql"
        target.write_text("""
        CREATE TABLE users (id INT, name VARCHAR(50));
        CREATE TABLE orders (id INT, user_id INT);
        CREATE TABLE products (id INT);
        """)
        main(['compare', '--source', str(schema_dir), '--target', str(target), '--plan', '--no-color'])
        out = capsys.readouterr().out
        assert "Create Table: products (missing from Database 1)" in out
        assert "Create Table: users" not in out

    def test_missing_source_exits(self, tmp_path, capsys):
        target = tmp_path / "t.sql"
        target.write_text("CREATE TABLE a (id INT);")
        with pytest.raises(SystemExit) as exc:
            main(['compare', '--source', str(tmp_path / 'nope.sql'), '--target', str(target), '--plan'])
        assert exc.value.code == 1
        assert "Path not found" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(['--version'])
        assert exc.value.code == 0
        assert "SQompare v" in capsys.readouterr().out

    def test_compare_livedb_uses_introspector(self, dumps, capsys):
        from sqompare.parsers.mysql import parse
        source, target = dumps

        with patch('sqompare.introspector.DBIntrospector') as mock_introspector:
            instance = mock_introspector.return_value
            instance.introspect.return_value = parse(SOURCE_SQL, 'live')
            instance.engine.url.render_as_string.return_value = 'mysql+pymysql://u:***@h/db'
            main(['compare-livedb', '--source', 'mysql://u:p@h/db', '--target', target,
                  '--source-label', 'live', '--plan', '--no-color'])

        mock_introspector.assert_called_once_with('mysql://u:p@h/db')
        instance.introspect.assert_called_once_with('live')
        assert "users.name (VARCHAR(50)) missing from Database 2" in capsys.readouterr().out
