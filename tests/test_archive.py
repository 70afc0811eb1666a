import io
import os
import tarfile

import pytest

from reconflow.archive import backup_workspace, extract_backup


def _workspace(tmp_path):
    ws = tmp_path / "workspaces" / "example.com"
    (ws / "subdomain").mkdir(parents=True)
    (ws / "subdomain" / "final.txt").write_text("a.example.com\n", encoding="utf-8")
    (ws / "done").write_text("done", encoding="utf-8")
    return ws


def test_backup_then_extract_round_trip(tmp_path):
    ws = _workspace(tmp_path)
    dest = backup_workspace(ws, tmp_path / "backups", "example.com")
    assert dest == os.path.join(str(tmp_path / "backups"), "example.com") + ".tar.gz"
    assert tarfile.is_tarfile(dest)

    out = extract_backup(dest, tmp_path / "restore")
    restored = os.path.join(out, "example.com", "subdomain", "final.txt")
    with open(restored, encoding="utf-8") as handle:
        assert handle.read() == "a.example.com\n"
    assert os.path.isfile(os.path.join(out, "example.com", "done"))


def test_backup_replaces_previous(tmp_path):
    ws = _workspace(tmp_path)
    backups = tmp_path / "backups"
    backups.mkdir()
    old = backups / "example.com.tar.gz"
    old.write_text("stale", encoding="utf-8")
    dest = backup_workspace(ws, backups, "example.com")
    assert dest == str(old)
    with tarfile.open(dest) as archive:
        assert "example.com/done" in archive.getnames()


def test_backup_missing_workspace(tmp_path):
    with pytest.raises(FileNotFoundError):
        backup_workspace(tmp_path / "nothing", tmp_path / "backups", "nothing")


def test_extract_missing_backup(tmp_path):
    with pytest.raises(FileNotFoundError):
        extract_backup(tmp_path / "missing.tar.gz", tmp_path / "out")


def test_extract_rejects_path_traversal(tmp_path):
    evil = tmp_path / "evil.tar.gz"
    with tarfile.open(evil, "w:gz") as archive:
        data = b"x"
        info = tarfile.TarInfo("../escaped.txt")
        info.size = len(data)
        archive.addfile(info, io.BytesIO(data))
    with pytest.raises(ValueError):
        extract_backup(evil, tmp_path / "out")
    assert not (tmp_path / "escaped.txt").exists()