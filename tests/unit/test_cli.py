"""
CLI Tests
Tests for pmtorrent_cli (list, piece, verify, config)
"""
import json

import pytest

from pmtorrent.files import File
from pmtorrent_cli.commands import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, EXIT_VERIFICATION_FAILED
from pmtorrent_cli.main import create_parser, main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every command in an empty directory with no config or env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("PMTORRENT_LOG_LEVEL", "PMTORRENT_LOG_FILE", "PMTORRENT_OUTPUT_FORMAT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def piece_doc(tmp_path, seven_chunk_file):
    out = tmp_path / "piece.json"
    assert main(["piece", str(seven_chunk_file), "6", "--out", str(out)]) == EXIT_SUCCESS
    return out


class TestParser:
    def test_subcommands(self):
        parser = create_parser()

        args = parser.parse_args(["piece", "a.bin", "3"])

        assert args.command == "piece"
        assert args.index == 3

    def test_no_command_returns_error(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR


class TestList:
    def test_json(self, capsys, seven_chunk_file, seven_chunk_data):
        assert main(["list", str(seven_chunk_file), "--json"]) == EXIT_SUCCESS

        out = json.loads(capsys.readouterr().out)

        assert out == [{"hash": File(seven_chunk_data).root().hex(), "pieces": 7}]

    def test_human(self, capsys, seven_chunk_file, seven_chunk_data):
        assert main(["list", str(seven_chunk_file)]) == EXIT_SUCCESS

        out = capsys.readouterr().out

        assert File(seven_chunk_data).root().hex() in out
        assert "pieces=7" in out

    def test_default_paths_from_config(self, tmp_path, capsys, seven_chunk_file):
        config = tmp_path / "pmtorrent.json"
        config.write_text(json.dumps({"default_paths": [str(seven_chunk_file)], "output_format": "json"}))

        assert main(["list"]) == EXIT_SUCCESS

        assert json.loads(capsys.readouterr().out)[0]["pieces"] == 7

    def test_no_paths(self):
        assert main(["list"]) == EXIT_RUNTIME_ERROR

    def test_empty_file(self, tmp_path):
        empty = tmp_path / "empty.bin"
        empty.write_bytes(b"")

        assert main(["list", str(empty)]) == EXIT_RUNTIME_ERROR

    def test_missing_file(self, tmp_path):
        assert main(["list", str(tmp_path / "missing.bin")]) == EXIT_RUNTIME_ERROR


class TestPiece:
    def test_writes_document(self, piece_doc, seven_chunk_data):
        doc = json.loads(piece_doc.read_text())

        assert doc["hash"] == File(seven_chunk_data).root().hex()
        assert doc["index"] == 6
        assert doc["pieces"] == 7
        assert len(doc["proof"]) == 3

    def test_stdout(self, capsys, seven_chunk_file):
        assert main(["piece", str(seven_chunk_file), "0"]) == EXIT_SUCCESS

        assert json.loads(capsys.readouterr().out)["index"] == 0

    def test_out_of_range(self, seven_chunk_file):
        assert main(["piece", str(seven_chunk_file), "7"]) == EXIT_RUNTIME_ERROR


class TestVerify:
    def test_genuine_piece(self, capsys, piece_doc):
        assert main(["verify", str(piece_doc), "--json"]) == EXIT_SUCCESS

        report = json.loads(capsys.readouterr().out)

        assert report["ok"] is True
        assert report["computed_root"] == report["trusted_root"]

    def test_human_output(self, capsys, piece_doc):
        assert main(["verify", str(piece_doc)]) == EXIT_SUCCESS
        assert "ok: true" in capsys.readouterr().out

    def test_tampered_content(self, piece_doc):
        doc = json.loads(piece_doc.read_text())
        doc["content"] = "AA=="
        piece_doc.write_text(json.dumps(doc))

        assert main(["verify", str(piece_doc)]) == EXIT_VERIFICATION_FAILED

    def test_other_root(self, piece_doc):
        assert main(["verify", str(piece_doc), "--root", "11" * 32]) == EXIT_VERIFICATION_FAILED

    def test_truncated_proof(self, capsys, piece_doc):
        doc = json.loads(piece_doc.read_text())
        doc["proof"] = doc["proof"][:1]
        piece_doc.write_text(json.dumps(doc))

        assert main(["verify", str(piece_doc), "--json"]) == EXIT_VERIFICATION_FAILED
        assert "error" in json.loads(capsys.readouterr().out)

    def test_malformed_document(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"hash": "xyz"}))

        assert main(["verify", str(bad)]) == EXIT_RUNTIME_ERROR

    def test_bad_root_argument(self, piece_doc):
        assert main(["verify", str(piece_doc), "--root", "abc"]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    def test_init_and_show(self, tmp_path, capsys):
        path = tmp_path / "pmtorrent.json"

        assert main(["config", "--init", "--path", str(path)]) == EXIT_SUCCESS
        assert path.exists()
        assert main(["config", "--init", "--path", str(path)]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["output_format"] == "human"

    def test_broken_config_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")

        assert main(["--config", str(path), "config", "--show"]) == EXIT_RUNTIME_ERROR

    def test_broken_yaml_config_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("output_format: [json\n")

        assert main(["--config", str(path), "config", "--show"]) == EXIT_RUNTIME_ERROR
