import pytest

from linuxcheck.kernelver import kernel_version
from linuxcheck.meminfo import (
    MemInfo,
    get_path_proc_meminfo,
    parse_meminfo,
    read_meminfo,
)
from linuxcheck.messages import NagStatus, PluginError

MEMINFO = """\
MemTotal:       16384256 kB
MemFree:        11918208 kB
MemAvailable:   14564424 kB
Buffers:          384876 kB
Cached:          2741476 kB
SwapCached:         1024 kB
Active:          3090692 kB
Inactive:        1044404 kB
Active(anon):    1068780 kB
Inactive(anon):   327428 kB
Active(file):    2021912 kB
Inactive(file):   716976 kB
Unevictable:           0 kB
Mlocked:               0 kB
SwapTotal:       8388604 kB
SwapFree:        8387580 kB
Dirty:                92 kB
Writeback:             0 kB
AnonPages:       1008780 kB
Mapped:           480000 kB
Shmem:            387476 kB
Slab:             202816 kB
SReclaimable:     152528 kB
SUnreclaim:        50288 kB
Committed_AS:    3678828 kB
HugePages_Total:       0
"""


@pytest.fixture
def meminfo_from_env(tmp_path, monkeypatch):
    path = tmp_path / "meminfo"
    path.write_text(MEMINFO)
    monkeypatch.setenv("NPL_TEST_PATH_PROCMEMINFO", str(path))
    return read_meminfo()


@pytest.mark.parametrize(
    "field, expected",
    [
        ("active", 3090692),
        ("active_file", 2021912),
        ("anon_pages", 1008780),
        ("main_buffers", 384876),
        ("page_cache", 2741476),
        ("committed_as", 3678828),
        ("dirty", 92),
        ("high_total", 0),
        ("inact_clean", 0),
        ("inact_dirty", 0),
        ("inact_laundry", 0),
        ("inactive", 1044404),
        ("inactive_file", 716976),
        ("low_free", 0),
        ("main_available", 14564424),
        ("main_free", 11918208),
        ("main_total", 16384256),
        ("slab_reclaimable", 152528),
        ("main_shared", 387476),
        ("slab", 202816),
        ("swap_cached", 1024),
        ("swap_free", 8387580),
        ("swap_total", 8388604),
    ],
)
def test_proc_parser(meminfo_from_env, field, expected):
    assert getattr(meminfo_from_env, field) == expected


def test_low_total_stays_unset(meminfo_from_env):
    assert meminfo_from_env.low_total is None


def test_env_overrides_path(tmp_path, monkeypatch):
    monkeypatch.setenv("NPL_TEST_PATH_PROCMEMINFO", str(tmp_path / "x"))
    assert get_path_proc_meminfo() == str(tmp_path / "x")


def test_default_path(monkeypatch):
    monkeypatch.delenv("NPL_TEST_PATH_PROCMEMINFO", raising=False)
    assert get_path_proc_meminfo() == "/proc/meminfo"


def test_derived_values():
    info = parse_meminfo(MEMINFO)
    assert info.main_cached == info.page_cache + info.slab_reclaimable
    assert info.main_used == (
        info.main_total - info.main_free - info.main_cached - info.main_buffers
    )
    assert info.swap_used == info.swap_total - info.swap_free


def test_zero_low_total_falls_back_to_main():
    info = parse_meminfo("MemTotal: 1000 kB\nMemFree: 400 kB\nLowTotal: 0 kB\n"
                         "MemAvailable: 500 kB\n")
    assert info.low_total == 1000
    assert info.low_free == 400


def test_inactive_from_old_fields():
    text = ("Inact_dirty: 10 kB\nInact_clean: 20 kB\nInact_laundry: 30 kB\n"
            "MemAvailable: 1 kB\n")
    info = parse_meminfo(text)
    assert info.inactive == 10 + 20 + 30


def test_available_falls_back_to_free_on_old_kernels():
    info = parse_meminfo("MemTotal: 1000 kB\nMemFree: 321 kB\n",
                         kernel_version=kernel_version(2, 6, 20))
    assert info.main_available == info.main_free


def test_available_estimated_without_watermark():
    text = ("MemFree: 100 kB\nActive(file): 40 kB\nInactive(file): 60 kB\n"
            "SReclaimable: 30 kB\n")
    info = parse_meminfo(text, kernel_version=kernel_version(3, 10, 0),
                         min_free_kb=0)
    assert info.main_available == 100 + 40 + 60 + 30


def test_available_estimate_never_negative():
    info = parse_meminfo("MemFree: 100 kB\n",
                         kernel_version=kernel_version(3, 10, 0),
                         min_free_kb=1000000)
    assert info.main_available == 0


def test_missing_file_raises(tmp_path):
    with pytest.raises(PluginError) as excinfo:
        read_meminfo(str(tmp_path / "missing"))
    assert excinfo.value.status == NagStatus.UNKNOWN


def test_empty_meminfo_defaults():
    info = parse_meminfo("MemAvailable: 0 kB\n")
    assert info == MemInfo(inactive=0, main_available=0)