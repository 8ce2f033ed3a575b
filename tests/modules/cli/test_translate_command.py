from __future__ import annotations

from pathlib import Path

import pytest

from subtrans import cli

from tests.helpers.translators import RecordingTranslator, build_srt


class _ClientStub(RecordingTranslator):
    async def __aenter__(self) -> "_ClientStub":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None


@pytest.fixture
def stub_client(monkeypatch) -> _ClientStub:
    stub = _ClientStub()
    monkeypatch.setattr(cli, "create_client", lambda settings, **kwargs: stub)
    return stub


def _write_srt(tmp_path: Path, count: int = 3) -> Path:
    path = tmp_path / "input.srt"
    path.write_text(build_srt(count), encoding="utf-8")
    return path


def test_translate_command_writes_output_file(tmp_path: Path, stub_client: _ClientStub) -> None:
    source = _write_srt(tmp_path, 5)
    output = tmp_path / "out.srt"

    exit_code = cli.main(
        ["translate", str(source), "--target-language", "fr", "--output", str(output)]
    )

    assert exit_code == 0
    assert output.read_text(encoding="utf-8").count("[fr] Line") == 5
    assert len(stub_client.calls) == 5


def test_translate_command_prints_to_stdout(tmp_path: Path, stub_client, capsys) -> None:
    source = _write_srt(tmp_path, 1)

    exit_code = cli.main(["translate", str(source), "--one-shot", "--note", "news"])

    assert exit_code == 0
    assert "[zh-CN] Line 1" in capsys.readouterr().out
    assert stub_client.calls == [("Line 1", "zh-CN", "news")]


def test_translate_command_rejects_empty_input(tmp_path: Path, stub_client) -> None:
    source = tmp_path / "empty.srt"
    source.write_text("\n\n", encoding="utf-8")

    assert cli.main(["translate", str(source)]) == 2
    assert stub_client.calls == []


def test_translate_command_rejects_missing_file(tmp_path: Path, stub_client) -> None:
    assert cli.main(["translate", str(tmp_path / "absent.srt")]) == 2


def test_translate_command_requires_api_key(tmp_path: Path) -> None:
    source = _write_srt(tmp_path)

    assert cli.main(["translate", str(source)]) == 1
