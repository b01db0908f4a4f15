import logging

import pytest
import requests

from usedbooks.utils.retry import http_retry


def flaky(failures, exc=requests.ConnectionError):
    calls = []

    def call():
        calls.append(1)
        if len(calls) <= failures:
            raise exc("boom")
        return "ok"

    return call, calls


def test_retries_network_errors_and_logs(caplog):
    call, calls = flaky(1)

    with caplog.at_level(logging.WARNING, logger="usedbooks.utils.retry"):
        assert http_retry()(call)() == "ok"

    assert len(calls) == 2
    assert "Retrying" in caplog.text


def test_gives_up_after_attempts():
    call, calls = flaky(5)

    with pytest.raises(requests.ConnectionError):
        http_retry(attempts=2)(call)()
    assert len(calls) == 2


def test_other_errors_are_not_retried():
    call, calls = flaky(1, exc=ValueError)

    with pytest.raises(ValueError):
        http_retry()(call)()
    assert len(calls) == 1
