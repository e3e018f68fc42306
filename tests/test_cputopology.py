from unittest import mock

import pytest

from linuxcheck.cputopology import (
    cpumask_parse,
    get_cputopology_read,
    get_processor_number_kernel_max,
    get_processor_number_online,
    get_processor_number_total,
)
from linuxcheck.messages import PluginError


def _fake_sysconf(online):
    def sysconf(name):
        return online

    return sysconf


def _make_cpu(root, cpu, threads, cores):
    topo = root / f"cpu{cpu}" / "topology"
    topo.mkdir(parents=True)
    (topo / "thread_siblings").write_text(threads + "\n")
    (topo / "core_siblings").write_text(cores + "\n")


def test_cpumask_prefix_is_ignored():
    assert cpumask_parse("0x3") == cpumask_parse("3")


def test_cpumask_commas_separate_words():
    assert cpumask_parse("0000000f,0000000f") == 2 * cpumask_parse("f")


def test_cpumask_full_nibbles():
    for n in range(1, 9):
        assert cpumask_parse("f" * n) == 4 * n


def test_cpumask_uppercase_same_as_lowercase():
    assert cpumask_parse("AB") == cpumask_parse("ab")


def test_cpumask_empty_is_zero():
    assert cpumask_parse("") == 0


def test_cpumask_invalid_raises():
    with pytest.raises(ValueError):
        cpumask_parse("zz")


def test_kernel_max(tmp_path):
    (tmp_path / "kernel_max").write_text("7\n")
    assert get_processor_number_kernel_max(str(tmp_path)) == 8


def test_kernel_max_missing_raises(tmp_path):
    with pytest.raises(PluginError):
        get_processor_number_kernel_max(str(tmp_path))


def test_online_uses_sysconf():
    with mock.patch("os.sysconf", _fake_sysconf(6)):
        assert get_processor_number_online() == 6


def test_total_unknown_is_minus_one():
    with mock.patch("os.sysconf", side_effect=ValueError):
        assert get_processor_number_total() == -1


def test_topology_defaults_without_files(tmp_path):
    (tmp_path / "kernel_max").write_text("3\n")
    assert get_cputopology_read(str(tmp_path)) == (1, 1, 1)


def test_topology_two_threads_two_cores(tmp_path):
    (tmp_path / "kernel_max").write_text("3\n")
    for cpu in range(4):
        _make_cpu(tmp_path, cpu, "3", "f")
    with mock.patch("os.sysconf", _fake_sysconf(4)):
        assert get_cputopology_read(str(tmp_path)) == (1, 2, 2)


def test_topology_values_at_least_one(tmp_path):
    (tmp_path / "kernel_max").write_text("1\n")
    _make_cpu(tmp_path, 0, "0", "0")
    with mock.patch("os.sysconf", _fake_sysconf(1)):
        assert all(v >= 1 for v in get_cputopology_read(str(tmp_path)))