import argparse

import pytest

from healthprobe.core.config import ProbeConfig, ThresholdConfig
from healthprobe.core.enums import Metric, OutputFormat
from healthprobe.core.exceptions import ConfigurationError
from healthprobe.main import build_parser


def test_defaults():
    config = ProbeConfig()
    assert config.thresholds.as_dict() == {
        Metric.CPU_USAGE: 80.0,
        Metric.MEMORY_USAGE: 80.0,
        Metric.DISK_USAGE: 80.0
    }
    assert config.disk_path == '/'
    assert config.url == 'http://localhost:5000'
    assert config.timeout == 5.0
    assert config.strict is False
    assert config.loop is False


@pytest.mark.parametrize('kwargs', [{'cpu': -1}, {'memory': 100.5}, {'disk': 'high'}])
def test_invalid_thresholds(kwargs):
    with pytest.raises(ConfigurationError):
        ThresholdConfig(**kwargs)


def test_no_limit_for_informational_metrics():
    with pytest.raises(KeyError):
        ThresholdConfig().limit_for(Metric.PROCESS_COUNT)


@pytest.mark.parametrize('kwargs', [
    {'timeout': 0},
    {'timeout': -5},
    {'cpu_interval': 0},
    {'url': 'localhost:5000'},
    {'url': 'ftp://example.com'},
    {'interval': 0},
    {'count': 3},
    {'interval': 5, 'count': 0},
    {'check_resources': False, 'check_endpoint': False},
    {'disk_path': ''}
])
def test_invalid_probe_config(kwargs):
    with pytest.raises(ConfigurationError):
        ProbeConfig(**kwargs)


def test_url_not_validated_when_probe_disabled():
    config = ProbeConfig(url='not a url', check_endpoint=False)
    assert config.check_resources


def test_from_args():
    args = build_parser().parse_args([
        '--cpu-threshold', '70',
        '--disk-path', '/var',
        '--url', 'https://example.com/health',
        '--timeout', '2.5',
        '--strict',
        '--format', 'json',
        '--interval', '30',
        '--count', '4'
    ])

    config = ProbeConfig.from_args(args)

    assert config.thresholds == ThresholdConfig(cpu=70, memory=80, disk=80)
    assert config.disk_path == '/var'
    assert config.url == 'https://example.com/health'
    assert config.timeout == 2.5
    assert config.strict is True
    assert config.output_format == OutputFormat.JSON
    assert config.interval == 30.0
    assert config.count == 4
    assert config.loop is True


def test_from_args_wraps_errors():
    args = argparse.Namespace(
        cpu_threshold=80, memory_threshold=80, disk_threshold=80,
        disk_path='/', url='http://localhost:5000', timeout=5, cpu_interval=1,
        strict=False, no_resources=False, no_probe=False, format='yaml',
        interval=None, count=None
    )
    with pytest.raises(ConfigurationError):
        ProbeConfig.from_args(args)
