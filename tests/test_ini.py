import pytest

from carbonstore.ini import IniError, parse_ini_file


def _write(tmp_path, content):
    path = tmp_path / "config.ini"
    path.write_text(content)
    return path


def test_sections_in_order(tmp_path):
    path = _write(
        tmp_path,
        "[first]\npattern = ^a\\.\n\n[second]\npattern = .*\nretentions = 1m:30d\n",
    )
    config = parse_ini_file(path)
    assert config == [
        {"name": "first", "pattern": "^a\\."},
        {"name": "second", "pattern": ".*", "retentions": "1m:30d"},
    ]


def test_comments_and_blank_lines_skipped(tmp_path):
    path = _write(tmp_path, "# comment\n; other\n\n[only]\nkey = value\n# trailing\n")
    assert parse_ini_file(path) == [{"name": "only", "key": "value"}]


def test_keys_lowercased_and_quotes_trimmed(tmp_path):
    path = _write(tmp_path, "[ sec ]\nXFilesFactor = '0.5'\nMethod = \"sum\"\n")
    assert parse_ini_file(path) == [
        {"name": "sec", "xfilesfactor": "0.5", "method": "sum"}
    ]


def test_value_may_contain_equals(tmp_path):
    path = _write(tmp_path, "[sec]\npattern = a=b\n")
    assert parse_ini_file(path)[0]["pattern"] == "a=b"


def test_empty_value(tmp_path):
    path = _write(tmp_path, "[sec]\npattern =\n")
    assert parse_ini_file(path)[0]["pattern"] == ""


def test_empty_file(tmp_path):
    assert parse_ini_file(_write(tmp_path, "")) == []


def test_unfinished_section(tmp_path):
    with pytest.raises(IniError, match="unfinished section name") as info:
        parse_ini_file(_write(tmp_path, "[broken\nkey = value\n"))
    assert info.value.line == 1


def test_empty_section_name(tmp_path):
    with pytest.raises(IniError, match="empty section name"):
        parse_ini_file(_write(tmp_path, "[  ]\n"))


def test_key_before_section(tmp_path):
    with pytest.raises(IniError, match="config section not found"):
        parse_ini_file(_write(tmp_path, "key = value\n"))


def test_line_without_equals(tmp_path):
    with pytest.raises(IniError, match="key = value not found") as info:
        parse_ini_file(_write(tmp_path, "[sec]\n\njust text\n"))
    assert info.value.line == 3


def test_empty_key(tmp_path):
    with pytest.raises(IniError, match="key is empty"):
        parse_ini_file(_write(tmp_path, "[sec]\n = value\n"))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_ini_file(tmp_path / "absent.ini")