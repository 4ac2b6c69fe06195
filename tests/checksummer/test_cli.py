"""Tests for the filechecksum command line."""

import logging
import threading

import pytest
from filechecksum.checksummer.algorithms import AlgorithmId
from filechecksum.checksummer.cli import (
    EXIT_FAILURE, EXIT_SUCCESS, EXIT_UNKNOWN, apply_selection, main, parse_buffer_size
)
from filechecksum.checksummer.engine import ChecksumEngine
from filechecksum.checksummer.errors import InvalidBufferSizeError

ABC_MD5 = "900150983cd24fb0d6963f7d28e17f72"
ABC_SHA1 = "a9993e364706816aba3e25717850c26c9cd0d89d"
ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


@pytest.fixture
def abc_file(tmp_path):
    path = tmp_path / "abc.txt"
    path.write_bytes(b"abc")
    return path


@pytest.fixture(autouse=True)
def _isolated(isolated_config, restore_root_logger):
    """Every CLI test runs without real config and restores logging."""


class TestParseBufferSize:
    @pytest.mark.parametrize("text, expected", [
        ("65536", 65536),
        ("256", 256),
        ("256b", 256),
        ("64k", 64 * 1024),
        ("64KB", 64 * 1024),
        ("4kib", 4 * 1024),
        ("1m", 1024 * 1024),
        ("64MiB", 64 * 1024 * 1024),
    ])
    def test_valid(self, text, expected):
        assert parse_buffer_size(text) == expected

    @pytest.mark.parametrize("text", ["255", "65m", "abc", "12gb", "", "1234567890"])
    def test_invalid(self, text):
        with pytest.raises(InvalidBufferSizeError):
            parse_buffer_size(text)


class TestApplySelection:
    def test_flags_apply_left_to_right(self):
        base = {AlgorithmId.CRC32, AlgorithmId.MD5, AlgorithmId.SHA1}

        assert apply_selection(base, ["none", "sha256"]) == {AlgorithmId.CRC32, AlgorithmId.SHA256}
        assert apply_selection(base, ["sha256", "none"]) == {AlgorithmId.CRC32}
        assert apply_selection(base, ["all"]) == set(AlgorithmId)

    def test_no_flags_keeps_base(self):
        base = {AlgorithmId.CRC32, AlgorithmId.MD5}
        assert apply_selection(base, None) == base


class TestMain:
    """End-to-end runs of the console entry point."""

    def test_no_candidates_is_unknown(self, abc_file, capsys):
        assert main([str(abc_file)]) == EXIT_UNKNOWN

        out = capsys.readouterr().out
        assert "abc.txt" in out
        assert "CRC32 checksum: 352441c2" in out
        assert f"MD5 checksum: {ABC_MD5}" in out
        assert f"SHA1 checksum: {ABC_SHA1}" in out
        assert "SHA256" not in out

    def test_matching_candidate(self, abc_file, capsys):
        raw = "  BA7816BF-8F01-CFEA-4141-40DE5DAE2223-B00361A3-9617-7A9C-B410-FF61F20015AD"

        assert main(["--sha256", str(abc_file), raw]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"SHA256 checksum: {ABC_SHA256}" in out
        assert "Successfully matched the SHA256 checksum." in out

    def test_every_candidate_must_match(self, abc_file, capsys):
        assert main([str(abc_file), ABC_MD5, "deadbeef"]) == EXIT_FAILURE

        out = capsys.readouterr().out
        assert "Successfully matched the MD5 checksum." in out
        assert "Supplied checksum <deadbeef> does not match" in out

    def test_candidate_for_disabled_algorithm_fails(self, abc_file):
        assert main(["--none", str(abc_file), ABC_MD5]) == EXIT_FAILURE

    def test_empty_candidate_fails(self, abc_file):
        assert main([str(abc_file), "--", "- -"]) == EXIT_FAILURE

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.iso"), ABC_MD5]) == EXIT_FAILURE

        assert "Can't open file" in capsys.readouterr().err

    def test_invalid_buffer_size(self, abc_file, capsys):
        assert main(["-b", "1k0", str(abc_file)]) == EXIT_FAILURE

        assert "Invalid buffer size" in capsys.readouterr().err

    def test_buffer_size_does_not_change_result(self, abc_file, capsys):
        assert main(["-b", "256", str(abc_file), "352441c2"]) == EXIT_SUCCESS

    def test_unknown_option_uses_failure_status(self, abc_file):
        with pytest.raises(SystemExit) as exc_info:
            main(["--sha3", str(abc_file)])
        assert exc_info.value.code == EXIT_FAILURE

    def test_config_file_enables_sha512(self, abc_file, tmp_path, capsys):
        config_path = tmp_path / "custom.toml"
        config_path.write_text("[checksum]\nsha512 = true\nmd5 = false\n", encoding="utf-8")

        main(["--config", str(config_path), str(abc_file)])

        out = capsys.readouterr().out
        assert "SHA512 checksum:" in out
        assert "MD5 checksum:" not in out

    def test_broken_config_fails(self, abc_file, tmp_path):
        config_path = tmp_path / "broken.toml"
        config_path.write_text("[checksum]\nchunk_size = 1\n", encoding="utf-8")

        assert main(["--config", str(config_path), str(abc_file)]) == EXIT_FAILURE

    def test_timeout_zero_cancels(self, tmp_path, capsys):
        big = tmp_path / "big.bin"
        big.write_bytes(b"\0" * (4 * 1024 * 1024))

        status = main(["-b", "256", "--all", "--timeout", "0", str(big)])

        # A zero deadline may still lose the race against a fast disk
        assert status in (EXIT_FAILURE, EXIT_UNKNOWN)
        if status == EXIT_FAILURE:
            assert "cancelled" in capsys.readouterr().err

    def test_size_printed_before_failed_run(self, tmp_path, capsys):
        folder = tmp_path / "folder.iso"
        folder.mkdir()

        assert main([str(folder), ABC_MD5]) == EXIT_FAILURE

        captured = capsys.readouterr()
        assert "file name: folder.iso" in captured.out
        assert "file bytes:" in captured.out
        assert "Can't open file" in captured.err

    def test_size_line_comes_before_checksums(self, abc_file, capsys):
        main([str(abc_file)])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].strip() == "file name: abc.txt"
        assert lines[1].strip() == "file bytes: 3"
        assert lines[2].strip().startswith("CRC32 checksum:")

    def test_worker_crash_fails_instead_of_hanging(self, abc_file, monkeypatch, capsys):
        def explode(self, path, enabled, cancel_token=None, progress=None):
            raise RuntimeError("digest backend exploded")

        monkeypatch.setattr(ChecksumEngine, "run_file", explode)
        outcome = []
        runner = threading.Thread(target=lambda: outcome.append(main([str(abc_file), ABC_MD5])))
        runner.daemon = True

        runner.start()
        runner.join(timeout=5)

        assert not runner.is_alive()
        assert outcome == [EXIT_FAILURE]
        assert "digest backend exploded" in capsys.readouterr().err

    def test_progress_flag(self, abc_file):
        assert main(["--progress", str(abc_file)]) == EXIT_UNKNOWN

        assert logging.getLogger("filechecksum.checksummer.progress").level == logging.INFO
