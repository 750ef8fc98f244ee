"""End-to-end tests for resolving and packing."""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from pathlib import Path

import pytest

from llmpack.file_resolver import FileResolverConfig
from llmpack.pack_api import NothingToPackError, PackError, pack_paths, resolve_paths

FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _make_proj(root: Path) -> Path:
    proj = root / "proj"
    proj.mkdir()
    (proj / "a.py").write_text("print('a')\n")
    sub = proj / "sub"
    sub.mkdir()
    (sub / "b.js").write_text("console.log('b');\n")
    (sub / ".env").write_text("SECRET=1\n")
    git = sub / ".git"
    git.mkdir()
    (git / "config").write_text("[core]\n")
    return proj


def test_resolve_mixed_entry_points(tmp_path: Path):
    proj = _make_proj(tmp_path)

    files = resolve_paths([proj / "a.py", proj / "sub"])
    assert files == [proj / "a.py", proj / "sub" / "b.js"]


def test_pack_mixed_entry_points(tmp_path: Path):
    proj = _make_proj(tmp_path)

    result = pack_paths([proj / "a.py", proj / "sub"], proj, generated_at=FIXED_TIME)

    assert result.warnings == []
    assert result.files_packed == 2
    assert "# Total files: 2\n" in result.text
    assert "1. a.py\n" in result.text
    assert f"2. {os.path.join('sub', 'b.js')}\n" in result.text
    assert "# Language: python\n" in result.text
    assert "# Language: javascript\n" in result.text
    assert ".env" not in result.text
    assert "SECRET" not in result.text
    assert "[core]" not in result.text


def test_pack_empty_entry_list():
    with pytest.raises(NothingToPackError, match="No files or folders selected"):
        pack_paths([])


def test_pack_directory_without_files(tmp_path: Path):
    (tmp_path / ".hidden").write_text("x")
    (tmp_path / "empty").mkdir()

    with pytest.raises(NothingToPackError, match="No files found"):
        pack_paths([tmp_path])


def test_nothing_to_pack_is_pack_error():
    assert issubclass(NothingToPackError, PackError)
    assert not issubclass(NothingToPackError, OSError)


def test_pack_missing_entry_raises(tmp_path: Path):
    (tmp_path / "ok.py").write_text("pass")

    with pytest.raises(FileNotFoundError):
        pack_paths([tmp_path / "ok.py", tmp_path / "nope.py"])


def test_pack_uses_resolver_config(tmp_path: Path):
    (tmp_path / "keep.py").write_text("pass")
    (tmp_path / "drop.lock").write_text("lock")

    result = pack_paths(
        [tmp_path],
        tmp_path,
        config=FileResolverConfig(exclude=["*.lock"]),
        generated_at=FIXED_TIME,
    )
    assert "# Total files: 1\n" in result.text
    assert "drop.lock" not in result.text


def test_pack_one_unreadable_among_three(tmp_path: Path):
    one = tmp_path / "one.py"
    two = tmp_path / "two.py"
    three = tmp_path / "three.py"
    one.write_text("one = 1\n")
    two.write_text("two = 2\n")
    three.write_text("three = 3\n")

    if os.getuid() == 0:
        # Root ignores permission bits; make the file undecodable instead.
        two.write_bytes(b"\xff\xfe\x00binary")
    else:
        two.chmod(0o000)
    try:
        result = pack_paths([one, two, three], tmp_path, generated_at=FIXED_TIME)
    finally:
        two.chmod(stat.S_IRUSR | stat.S_IWUSR)

    assert result.files_packed == 2
    assert len(result.warnings) == 1
    assert "two.py" in result.warnings[0]
    assert "# FILE 1/3: one.py\n" in result.text
    assert "# FILE 3/3: three.py\n" in result.text
    assert "# FILE 2/3" not in result.text
    assert "one = 1" in result.text
    assert "three = 3" in result.text


def test_pack_idempotent(tmp_path: Path):
    proj = _make_proj(tmp_path)

    first = pack_paths([proj], proj, generated_at=FIXED_TIME)
    second = pack_paths([proj], proj, generated_at=FIXED_TIME)
    assert first.text == second.text
