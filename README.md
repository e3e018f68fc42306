# linuxcheck

Building blocks for Linux monitoring checks. The package reads `/proc` and
`/sys`, the Docker socket and the Podman varlink service, and returns plain
Python objects. It covers CPU time counters, CPU topology and description,
memory usage, per-CPU interrupt counts, file counts in a directory tree, and
the state of Docker and Podman containers. It needs only the standard
library and runs on Linux.

## Check states and errors

```python
from linuxcheck.messages import NagStatus, PluginError, state_text

state_text(NagStatus.WARNING)   # "WARNING"
state_text(42)                  # "UNKNOWN"
```

A reader that cannot get the data it needs raises `PluginError`. The error
has a `status` (usually `NagStatus.UNKNOWN`), an `exit_code`, and a
`format(program_name)` method that returns the line a plugin would print,
for example `"check_x: error opening /proc/stat (No such file or directory)"`.

## Counting keys

`linuxcheck.collection.Counter` counts string keys and keeps them in the
order in which it first saw them:

```python
from linuxcheck.collection import Counter

images = Counter()
images.put("redis", 1)
images.put("nginx", 1)
images.put("redis", 1)

images.keys()            # ["redis", "nginx"]
images.lookup("redis")   # 2
images.lookup("mysql")   # None
images.elements          # 3 insertions
images.unique            # 2 distinct keys
```

## CPU

```python
from linuxcheck.cpustats import (
    cpu_stats_get_time, cpu_stats_get_intr, cpu_stats_get_cswch,
    cpu_stats_get_softirq,
)

times = cpu_stats_get_time(1)    # [CpuTime] for the aggregate "cpu" line
times[0].user, times[0].idle
interrupts = cpu_stats_get_intr()
switches = cpu_stats_get_cswch()
```

`cpu_stats_get_time(n)` returns `n` entries: the aggregate line first, then
`cpu0`, `cpu1` and so on. If you set the environment variable
`NPL_TEST_PATH_PROCSTAT`, the readers use that file in place of `/proc/stat`.

`linuxcheck.cputopology` has these functions:

- `get_processor_number_total()` and `get_processor_number_online()` return
  CPU counts.
- `get_processor_number_kernel_max()` returns the kernel's CPU limit.
- `cpumask_parse(mask)` counts the CPUs set in a sysfs hex mask.
- `get_cputopology_read()` returns `(sockets, cores, threads)`.

`linuxcheck.cpudesc` describes the processor:

- `read_cpu_desc()` returns a `CpuDesc` that holds the architecture, vendor,
  family, model, MHz, flags, a `CpuMode` and CPU counts.
- `CpuDesc.virtualization()` gives `"AMD-V"` or `"VT-x"`.
- `parse_cpuinfo(text, arch)` works on cpuinfo text that you supply.

## Interrupts

`linuxcheck.interrupts.proc_interrupts_get_nintr_per_cpu()` returns the
total interrupts of each online CPU from `/proc/interrupts`. It returns
`None` if the file cannot be read. `parse_interrupts(lines, ncpus)` does the
same on lines that you supply.

## Memory

```python
from linuxcheck.meminfo import read_meminfo, parse_meminfo

mem = read_meminfo()       # /proc/meminfo, or NPL_TEST_PATH_PROCMEMINFO
mem.main_total, mem.main_available, mem.main_used, mem.swap_used
```

All figures are in kB. `main_cached` is Cached plus SReclaimable.
`main_used` is total minus free, cached and buffers.

When `MemAvailable` is missing, the value depends on the kernel:

- On kernels older than 2.6.27 it is taken as `MemFree`.
- Otherwise it is estimated from free memory, file pages and reclaimable
  slab against `vm/min_free_kbytes`.

`parse_meminfo(text, kernel_version, min_free_kb)` lets you supply those
inputs yourself.

## Kernel version

```python
from linuxcheck.kernelver import kernel_version, linux_version, parse_kernel_release

parse_kernel_release("5.15.0-generic")                          # (5, 15, 0)
linux_version("5.15.0-generic") == kernel_version(5, 15, 0)     # True
linux_version()                                                 # running kernel
```

A release with fewer than two numbers raises `PluginError`. So does a 2.x
or older release without a third number.

## Files

```python
from linuxcheck.files import FileFlags, filecount

counts = filecount("/var/spool/example", FileFlags.RECURSIVE, 0, 0, "*.msg")
counts.total, counts.regular_file, counts.directory, counts.hidden
```

The `age` filter is in seconds:

- A positive value matches regular files older than that.
- A negative value matches files newer than that.
- Zero turns the filter off.

The `size` filter is in bytes and works the same way: positive means
larger than, negative means smaller than, and zero turns it off.

Hidden entries are skipped unless you pass `FileFlags.INCLUDE_HIDDEN`. The
other flags are `REGULAR_ONLY`, `IGNORE_SYMLINKS` and `IGNORE_UNKNOWN`.
`check_age` and `check_size` expose the two filters on their own.

## Containers

The Docker helpers are:

- `linuxcheck.docker_count.docker_running_containers(image=None)` queries
  the Docker socket. It returns the number of running containers and a
  performance data string such as `"containers_redis=2 containers_total=2"`.
- `count_json_values(json_text, token)` and
  `containers_perfdata(counter, image)` let you use the same logic on data
  that you supply.
- `linuxcheck.docker_memory.read_docker_memory()` reads the Docker cgroup
  `memory.stat` into a `DockerMemoryDesc`.
- `parse_docker_memory_stat(text)` parses the same format from text.

The Podman helpers are:

- `linuxcheck.podman.PodmanVarlink` is a small varlink client for the Podman
  service and can be used as a context manager. Its methods are `call`,
  `list_containers`, `stats(shortid)` and `close`. Errors are raised as
  `VarlinkError`.
- `image_name_normalize` and `shortid` are helpers for labels and container
  IDs.
- `linuxcheck.podman_metrics.podman_running_containers(client, image)`
  returns the running count and performance data.
- `podman_stats(client, which_stats, report_perc, shift, image)` sums one
  `StatsType` metric over the running containers. It returns
  `(total, status, perfdata)` and prints byte totals in the given
  `UnitShift`.

```python
from linuxcheck.podman import PodmanVarlink
from linuxcheck.podman_metrics import StatsType, UnitShift, podman_stats

with PodmanVarlink() as client:
    total, status, perfdata = podman_stats(client, StatsType.MEMORY, False, UnitShift.M)
```

## What it does not do

The package provides readers and report builders, not finished checks:

- It installs no command.
- It does not parse warning or critical thresholds.
- It does not decide a final state.
- It does not print plugin output.

These are left to the program that uses it.

## Tests

The tests use pytest, which is listed in the `test` extra:

```
pip install -e .[test]
pytest
```