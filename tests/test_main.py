import pytest

import main


def test_cli_summary_and_queries(tmp_path, monkeypatch, capsys, simple_song):
    monkeypatch.chdir(tmp_path)
    p = tmp_path / "song.mid"
    p.write_bytes(simple_song)
    assert main.main([str(p), "--at", "1.99", "--dump", "2"]) == 0
    out = capsys.readouterr().out
    assert "480 ticks/quarter" in out
    assert "3841 ticks, 3 measures" in out
    assert "ch1: 3 notes" in out
    assert "001.01.001" in out
    assert "(E3, vel 100)" in out


def test_cli_bad_file_writes_error_log(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    p = tmp_path / "broken.mid"
    p.write_bytes(b"garbage")
    assert main.main([str(p)]) == 1
    assert list((tmp_path / "logs").glob("error-*.txt"))


def test_cli_survives_unwritable_error_log(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    p = tmp_path / "broken.mid"
    p.write_bytes(b"garbage")

    def _fail(title, exc):
        raise PermissionError("read-only logs/")
    monkeypatch.setattr(main, "log_exception", _fail)
    assert main.main([str(p)]) == 1


@pytest.mark.parametrize("bpm", ["0", "-90"])
def test_cli_rejects_non_positive_bpm(tmp_path, capsys, bpm):
    with pytest.raises(SystemExit) as ei:
        main.main([str(tmp_path / "x.mid"), "--bpm", bpm])
    assert ei.value.code == 2
    assert "must be > 0" in capsys.readouterr().err
