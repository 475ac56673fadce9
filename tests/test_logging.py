import logging

import mock
import pytest

from telehttp.internal import logger as telehttp_logger
from telehttp.internal.logger import LoggingBucket
from telehttp.internal.logger import TelehttpFormatter
from telehttp.internal.logger import get_logger
from telehttp.internal.logger import log_filter


def _record(name="telehttp.test", lineno=10):
    return logging.LogRecord(name, logging.INFO, "client.py", lineno, "request failed", None, None)


@pytest.fixture(autouse=True)
def reset_buckets():
    telehttp_logger._buckets.clear()
    yield
    telehttp_logger._buckets.clear()


def test_get_logger_adds_filter():
    log = get_logger("telehttp.test")
    assert log.name == "telehttp.test"
    assert log_filter in log.filters

    # filter is only added once
    get_logger("telehttp.test")
    assert log.filters.count(log_filter) == 1


def test_bucket_sampling():
    bucket = LoggingBucket(0.0, 0)
    with mock.patch("telehttp.internal.logger.time.monotonic", return_value=100.0):
        first = _record()
        assert bucket.is_sampled(first, 60) is True
        assert first.skipped == 0
        assert bucket.is_sampled(_record(), 60) is False
        assert bucket.is_sampled(_record(), 60) is False

    with mock.patch("telehttp.internal.logger.time.monotonic", return_value=161.0):
        record = _record()
        assert bucket.is_sampled(record, 60) is True
        assert record.skipped == 2


def test_log_filter_rate_limits_per_call_site():
    get_logger("telehttp.test").setLevel(logging.INFO)
    assert log_filter(_record(lineno=1)) is True
    assert log_filter(_record(lineno=1)) is False
    assert log_filter(_record(lineno=2)) is True


def test_log_filter_debug_is_not_limited():
    get_logger("telehttp.test").setLevel(logging.DEBUG)
    try:
        assert log_filter(_record(lineno=1)) is True
        assert log_filter(_record(lineno=1)) is True
    finally:
        get_logger("telehttp.test").setLevel(logging.NOTSET)


def test_log_filter_disabled():
    with mock.patch.object(telehttp_logger, "_rate_limit", 0):
        get_logger("telehttp.test").setLevel(logging.INFO)
        assert log_filter(_record(lineno=1)) is True
        assert log_filter(_record(lineno=1)) is True


def test_formatter_reports_skipped():
    record = _record()
    record.skipped = 3
    assert TelehttpFormatter().format(record) == "INFO request failed [3 skipped]"
    assert TelehttpFormatter().format(_record()) == "INFO request failed"
