# tests/test_sampler.py
from collections import namedtuple

import psutil
import pytest

from healthprobe.core.enums import Metric
from healthprobe.core.exceptions import SamplingError
from healthprobe.sampler import ResourceSampler
from conftest import CpuTimes


@pytest.fixture
def sampler():
    return ResourceSampler(disk_path='/', cpu_interval=0.01)


@pytest.mark.asyncio
async def test_sample_returns_resource_metrics_in_order(sampler, host):
    readings = await sampler.sample()

    assert [r.metric for r in readings] == Metric.resource_metrics()
    assert readings[0].value == 30.0
    assert readings[1].value == 25.0
    assert readings[2].value == 40.0
    assert readings[3].value == 312


@pytest.mark.asyncio
async def test_cpu_usage_uses_delta_over_window(sampler, host):
    host.set_usage(cpu=45.0)

    reading = await sampler.sample_metric(Metric.CPU_USAGE)

    assert reading.value == 45.0
    assert reading.details == {'window_seconds': 0.01}
    assert host.cpu_times.call_count == 2


def test_cpu_usage_between_snapshots():
    before = CpuTimes(100.0, 10.0, 50.0, 840.0)
    after = CpuTimes(130.0, 10.0, 60.0, 900.0)
    # 100 ticks elapsed, 60 of them idle
    assert ResourceSampler.cpu_usage_between(before, after) == 40.0


def test_cpu_usage_excludes_guest_time():
    GuestTimes = namedtuple('scputimes', ['user', 'nice', 'system', 'idle', 'guest', 'guest_nice'])
    before = GuestTimes(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    after = GuestTimes(50.0, 0.0, 0.0, 50.0, 20.0, 0.0)
    assert ResourceSampler.cpu_usage_between(before, after) == 50.0


def test_cpu_counters_not_advancing():
    snapshot = CpuTimes(1.0, 1.0, 1.0, 1.0)
    with pytest.raises(SamplingError) as exc_info:
        ResourceSampler.cpu_usage_between(snapshot, snapshot)
    assert exc_info.value.metric == Metric.CPU_USAGE


@pytest.mark.asyncio
async def test_memory_usage_is_used_over_total(sampler, host):
    host.set_usage(memory=92)

    reading = await sampler.sample_metric(Metric.MEMORY_USAGE)

    assert reading.value == 92.0
    assert reading.details['total_bytes'] == 16 * 1024 * 1024 * 1024


@pytest.mark.asyncio
async def test_disk_usage_for_configured_path(host):
    sampler = ResourceSampler(disk_path='/var', cpu_interval=0.01)

    reading = await sampler.sample_metric(Metric.DISK_USAGE)

    host.disk_usage.assert_called_once_with('/var')
    assert reading.value == 40.0
    assert reading.details['path'] == '/var'


@pytest.mark.asyncio
async def test_process_count(sampler, host):
    host.pids.return_value = [1, 2, 3]
    reading = await sampler.sample_metric(Metric.PROCESS_COUNT)
    assert reading.value == 3


@pytest.mark.asyncio
async def test_unreadable_counter_raises_sampling_error(sampler, host):
    host.virtual_memory.side_effect = psutil.AccessDenied()

    with pytest.raises(SamplingError) as exc_info:
        await sampler.sample_metric(Metric.MEMORY_USAGE)

    assert exc_info.value.metric == Metric.MEMORY_USAGE
    assert exc_info.value.cause == "access denied"
    assert isinstance(exc_info.value.original, psutil.AccessDenied)


@pytest.mark.asyncio
async def test_out_of_range_value_raises_sampling_error(sampler, host):
    host.disk_usage.return_value.percent = 150.0

    with pytest.raises(SamplingError) as exc_info:
        await sampler.sample_metric(Metric.DISK_USAGE)

    assert exc_info.value.metric == Metric.DISK_USAGE
    assert exc_info.value.cause.startswith("invalid reading:")
    assert "0-100" in exc_info.value.cause
    assert isinstance(exc_info.value.original, ValueError)


@pytest.mark.asyncio
async def test_missing_mount_raises_sampling_error():
    sampler = ResourceSampler(disk_path='/definitely/not/a/mount', cpu_interval=0.01)

    with pytest.raises(SamplingError) as exc_info:
        await sampler.sample_metric(Metric.DISK_USAGE)

    assert exc_info.value.metric == Metric.DISK_USAGE


@pytest.mark.asyncio
async def test_endpoint_is_not_a_resource_metric(sampler):
    with pytest.raises(ValueError):
        await sampler.sample_metric(Metric.ENDPOINT_STATUS)


@pytest.mark.asyncio
async def test_samples_real_host():
    readings = await ResourceSampler(cpu_interval=0.05).sample()

    by_metric = {r.metric: r.value for r in readings}
    for metric in (Metric.CPU_USAGE, Metric.MEMORY_USAGE, Metric.DISK_USAGE):
        assert 0 <= by_metric[metric] <= 100
    assert by_metric[Metric.PROCESS_COUNT] > 0
