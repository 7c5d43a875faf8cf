import io

import pytest

from Instruction import InputError, InputTruncated
from main import main, read_program


def run_cli(text, *argv):
    out = io.StringIO()
    status = main(list(argv), stdin=io.StringIO(text), stdout=out)
    return status, out.getvalue()


def test_read_program():
    assert read_program(io.StringIO("2\nLOAD R1, 0\r\nSTORE R1, 4")) == ["LOAD R1, 0", "STORE R1, 4"]


def test_read_program_truncated():
    with pytest.raises(InputTruncated):
        read_program(io.StringIO("3\nLOAD R1, 0\n"))


@pytest.mark.parametrize("header", ["", "\n", "abc\n", "-1\n", "two 2\n"])
def test_read_program_bad_count(header):
    with pytest.raises(InputError):
        read_program(io.StringIO(header))


def test_prints_total_cycles():
    status, out = run_cli("2\nLOAD R1, 0\nADD R2, R1, R3\n")
    assert status == 0
    assert out == "10\n"


def test_zero_instructions():
    assert run_cli("0\n") == (0, "0\n")


def test_truncated_input_is_fatal(capsys):
    status, out = run_cli("3\nLOAD R1, 0\n")
    assert status == 1
    assert out == ""
    assert "Failed to read instruction 2 of 3" in capsys.readouterr().err


def test_unreadable_count_is_fatal(capsys):
    status, out = run_cli("three\nLOAD R1, 0\n")
    assert status == 1
    assert out == ""
    assert "Failed to read number of instructions" in capsys.readouterr().err


def test_unknown_mnemonic_is_skipped(capsys):
    status, out = run_cli("2\nMUL R1, R2, R3\nLOAD R1, 0\n")
    assert status == 0
    assert out == "6\n"
    assert "Warning: skipping line 1" in capsys.readouterr().err


def test_config_file(tmp_path):
    path = tmp_path / "timing.yaml"
    path.write_text("timing_config:\n  dependent_alu_penalty: 0\n")

    status, out = run_cli("2\nADD R1, R2, R3\nSUB R4, R1, 5\n", "--config", str(path))

    assert status == 0
    assert out == "8\n"


def test_bad_config_file(tmp_path, capsys):
    path = tmp_path / "timing.yaml"
    path.write_text("timing_config:\n  memory_busy_penalty: -2\n")

    status, out = run_cli("1\nLOAD R1, 0\n", "--config", str(path))

    assert status == 1
    assert "memory_busy_penalty" in capsys.readouterr().err


def test_verbose_narration_goes_to_stderr(capsys):
    status, out = run_cli("1\nLOAD R1, 0\n", "--verbose")
    err = capsys.readouterr().err
    assert out == "6\n"
    assert "Instruction 0 (LOAD R1, 0): IF=1 ID=2 EX=3 MEM=4 WB=6" in err
    assert "IPC" in err


def test_count_is_first_token_of_header_line():
    assert read_program(io.StringIO("1 instructions follow\nLOAD R1, 0\n")) == ["LOAD R1, 0"]


def test_count_followed_by_text_on_same_line():
    status, out = run_cli("2 LOAD R9, 0\nLOAD R1, 0\nADD R2, R1, R3\n")
    assert status == 0
    assert out == "10\n"
