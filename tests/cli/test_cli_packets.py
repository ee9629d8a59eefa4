"""Command line interface tests."""

from __future__ import annotations

from pathlib import Path

from opuskit.cli import main


def test_no_arguments_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "usage: opuskit" in capsys.readouterr().out


def test_unknown_command(capsys) -> None:
    assert main(["transcode"]) == 1
    assert "unknown command" in capsys.readouterr().out


def test_version_uses_installed_backend(fake_lib, capsys) -> None:
    assert main(["version"]) == 0
    assert "libopus 1.4-fake" in capsys.readouterr().out


def test_inspect_reports_errors(fake_lib, tmp_path: Path, capsys) -> None:
    empty = tmp_path / "empty.opus"
    empty.write_bytes(b"")
    assert main(["inspect", str(empty)]) == 1
    assert "invalid argument" in capsys.readouterr().out

    assert main(["inspect", str(tmp_path / "missing.opus")]) == 1
    assert "Error:" in capsys.readouterr().out


def test_inspect_packet(native, tmp_path: Path, capsys) -> None:
    packet = tmp_path / "two.opus"
    packet.write_bytes(bytes([249, 255, 254, 255, 254]))
    assert main(["inspect", str(packet)]) == 0
    out = capsys.readouterr().out
    assert "0xf9" in out
    assert "FULLBAND" in out
    assert "MONO" in out
    assert "2, 2" in out


def test_combine_and_split(native, tmp_path: Path) -> None:
    first = tmp_path / "first.opus"
    second = tmp_path / "second.opus"
    merged = tmp_path / "merged.opus"
    first.write_bytes(bytes([249, 255, 254, 255, 254]))
    second.write_bytes(bytes([248, 255, 254]))

    assert main(["combine", str(first), str(second), "-o", str(merged)]) == 0
    assert list(merged.read_bytes()) == [251, 3, 255, 254, 255, 254, 255, 254]

    out_dir = tmp_path / "frames"
    assert main(["split", str(merged), "-o", str(out_dir)]) == 0
    frames = sorted(out_dir.iterdir())
    assert [path.name for path in frames] == ["merged-000.opus", "merged-001.opus", "merged-002.opus"]
    assert all(path.read_bytes() == bytes([248, 255, 254]) for path in frames)


def test_combine_rejects_incompatible_packets(native, tmp_path: Path, capsys) -> None:
    mono = tmp_path / "mono.opus"
    stereo = tmp_path / "stereo.opus"
    mono.write_bytes(bytes([248, 255, 254]))
    stereo.write_bytes(bytes([252, 255, 254]))
    assert main(["combine", str(mono), str(stereo), "-o", str(tmp_path / "out.opus")]) == 1
    assert "opus_repacketizer_cat" in capsys.readouterr().out
