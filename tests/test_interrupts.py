from unittest import mock

from linuxcheck.interrupts import parse_interrupts, proc_interrupts_get_nintr_per_cpu

SAMPLE = [
    "           CPU0       CPU1\n",
    "  0:         10          20   IO-APIC   2-edge      timer\n",
    "  1:          1           2   IO-APIC   1-edge      i8042\n",
    "ERR:          5\n",
]


def test_sums_per_cpu():
    assert parse_interrupts(SAMPLE, 2) == [10 + 1 + 5, 20 + 2]


def test_header_only_gives_zeros():
    assert parse_interrupts(SAMPLE[:1], 3) == [0, 0, 0]


def test_header_is_skipped_even_with_colon():
    lines = ["  7:  100  200\n", "  0:  1  2\n"]
    assert parse_interrupts(lines, 2) == [1, 2]


def test_lines_without_colon_are_ignored():
    lines = SAMPLE[:1] + ["garbage 100 200\n"] + SAMPLE[1:2]
    assert parse_interrupts(lines, 2) == [10, 20]


def test_result_length_matches_ncpus():
    assert len(parse_interrupts(SAMPLE, 4)) == 4


def test_text_columns_are_not_counted():
    lines = SAMPLE[:2]
    assert parse_interrupts(lines, 4) == [10, 20, 0, 0]


def test_missing_file_returns_none(tmp_path):
    assert proc_interrupts_get_nintr_per_cpu(str(tmp_path / "missing")) is None


def test_reads_file_with_online_cpus(tmp_path):
    path = tmp_path / "interrupts"
    path.write_text("".join(SAMPLE))
    with mock.patch("os.sysconf", lambda name: 2):
        result = proc_interrupts_get_nintr_per_cpu(str(path))
    assert result == parse_interrupts(SAMPLE, 2)