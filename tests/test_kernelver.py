import pytest

from linuxcheck.kernelver import (
    kernel_version,
    linux_version,
    parse_kernel_release,
)
from linuxcheck.messages import PluginError


def test_kernel_version_encoding():
    assert kernel_version(2, 6, 27) == 0x02061B


def test_kernel_version_is_ordered():
    assert kernel_version(2, 6, 27) > kernel_version(2, 6, 26)
    assert kernel_version(3, 0, 0) > kernel_version(2, 255, 255)


def test_kernel_version_clamps_sublevel():
    assert kernel_version(4, 9, 300) == kernel_version(4, 9, 255)


@pytest.mark.parametrize(
    "release, expected",
    [
        ("5.10.0-8-amd64", (5, 10, 0)),
        ("4.19.128", (4, 19, 128)),
        ("3.10", (3, 10, 0)),
        ("2.6.32-754.el6.x86_64", (2, 6, 32)),
    ],
)
def test_parse_kernel_release(release, expected):
    assert parse_kernel_release(release) == expected


@pytest.mark.parametrize("release", ["2.6", "5", "foo", ""])
def test_parse_kernel_release_rejects_non_standard(release):
    with pytest.raises(PluginError, match="non-standard kernel version"):
        parse_kernel_release(release)


def test_linux_version_from_release():
    assert linux_version("4.19.0-generic") == kernel_version(4, 19, 0)


def test_linux_version_of_running_kernel_is_positive():
    assert linux_version() >= kernel_version(2, 0, 0)