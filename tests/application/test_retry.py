"""Unit tests for the transaction retry decorator."""

import pytest

from shopcore.application import retry as retry_module
from shopcore.application.retry import retry_on_transaction_failure
from shopcore.domain.exceptions import TransactionFailureError, ValidationError


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(retry_module.time, "sleep", lambda _: None)


class Flaky:

    def __init__(self, failures: int, error: Exception | None = None) -> None:
        self.calls = 0
        self._failures = failures
        self._error = error or TransactionFailureError("disk full")

    @retry_on_transaction_failure(max_attempts=3)
    def handle(self) -> str:
        self.calls += 1
        if self.calls <= self._failures:
            raise self._error
        return "ok"


class TestRetry:

    def test_succeeds_after_transient_failures(self):
        flaky = Flaky(failures=2)
        assert flaky.handle() == "ok"
        assert flaky.calls == 3

    def test_gives_up_after_max_attempts(self):
        flaky = Flaky(failures=5)
        with pytest.raises(TransactionFailureError, match="disk full"):
            flaky.handle()
        assert flaky.calls == 3

    def test_business_errors_are_not_retried(self):
        flaky = Flaky(failures=5, error=ValidationError("nope"))
        with pytest.raises(ValidationError):
            flaky.handle()
        assert flaky.calls == 1

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            retry_on_transaction_failure(max_attempts=0)
