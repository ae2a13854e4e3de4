import asyncio
import socket
import sys
from collections import namedtuple
from itertools import cycle
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from healthprobe.core.config import ThresholdConfig
from healthprobe.core.enums import Metric
from healthprobe.core.models import Reading

CpuTimes = namedtuple('scputimes', ['user', 'nice', 'system', 'idle'])


def cpu_times_for(usage: float) -> list[CpuTimes]:
    """Two cpu_times() snapshots 100 ticks apart with the given busy share"""
    return [CpuTimes(0.0, 0.0, 0.0, 0.0), CpuTimes(float(usage), 0.0, 0.0, 100.0 - usage)]


def make_reading(metric: Metric, value, **kwargs) -> Reading:
    return Reading(metric=metric, value=value, **kwargs)


@pytest.fixture
def thresholds():
    return ThresholdConfig(cpu=80, memory=80, disk=80)


@pytest.fixture
def host():
    """
    Patch psutil counters used by the sampler. Tests adjust the returned
    mocks; defaults describe a healthy host.
    """
    with patch('healthprobe.sampler.psutil.cpu_times') as cpu_times, \
         patch('healthprobe.sampler.psutil.virtual_memory') as virtual_memory, \
         patch('healthprobe.sampler.psutil.disk_usage') as disk_usage, \
         patch('healthprobe.sampler.psutil.pids') as pids:

        cpu_times.side_effect = cycle(cpu_times_for(30.0))
        virtual_memory.return_value = MagicMock(
            used=4 * 1024 * 1024 * 1024,       # 4GB
            available=12 * 1024 * 1024 * 1024,  # 12GB
            total=16 * 1024 * 1024 * 1024       # 16GB
        )
        disk_usage.return_value = MagicMock(
            percent=40.0,
            free=600 * 1024 * 1024 * 1024,    # 600GB
            total=1000 * 1024 * 1024 * 1024   # 1TB
        )
        pids.return_value = list(range(1, 313))

        mocks = MagicMock(
            cpu_times=cpu_times,
            virtual_memory=virtual_memory,
            disk_usage=disk_usage,
            pids=pids
        )

        def set_usage(cpu=None, memory=None, disk=None):
            if cpu is not None:
                cpu_times.side_effect = cycle(cpu_times_for(cpu))
            if memory is not None:
                virtual_memory.return_value.used = virtual_memory.return_value.total * memory / 100
            if disk is not None:
                disk_usage.return_value.percent = float(disk)

        mocks.set_usage = set_usage
        yield mocks


@pytest_asyncio.fixture
async def app_server():
    """Local application with healthy, failing and slow routes"""
    async def healthy(request):
        return web.Response(text="ok")

    async def unavailable(request):
        return web.Response(status=503, text="maintenance")

    async def slow(request):
        await asyncio.sleep(2)
        return web.Response(text="late")

    app = web.Application()
    app.router.add_get('/', healthy)
    app.router.add_get('/down', unavailable)
    app.router.add_get('/slow', slow)

    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]
