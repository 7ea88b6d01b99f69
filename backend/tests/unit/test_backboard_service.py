"""
Tests for the Backboard transport's availability and retry handling.
"""

from types import SimpleNamespace

from nooklet.services.backboard import BackboardService, is_transient_error


class FlakyClient:
    """Fails with the given errors before succeeding."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def create_thread(self, assistant_id):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return SimpleNamespace(thread_id=f"thread-for-{assistant_id}")


def _service(client, max_retries=2):
    service = BackboardService(api_key="", max_retries=max_retries, retry_base_seconds=0)
    service.client = client
    return service


def test_transient_error_detection():
    assert is_transient_error(TimeoutError())
    assert is_transient_error(RuntimeError("HTTP 503 Service Unavailable"))
    assert is_transient_error(RuntimeError("Rate limit exceeded"))
    assert not is_transient_error(ValueError("invalid assistant id"))


async def test_unavailable_without_api_key(tmp_path):
    service = BackboardService(api_key="", documents_path=str(tmp_path))
    await service.initialize()

    assert service.is_available is False
    result = await service.create_thread("asst-1")
    assert result.success is False
    assert result.error == "Backboard service unavailable"


async def test_retries_transient_failures():
    client = FlakyClient(RuntimeError("502 bad gateway"), TimeoutError())

    result = await _service(client).create_thread("asst-1")
    assert result.success is True
    assert result.id == "thread-for-asst-1"
    assert client.calls == 3


async def test_gives_up_after_max_retries():
    client = FlakyClient(*(RuntimeError("503") for _ in range(5)))

    result = await _service(client, max_retries=1).create_thread("asst-1")
    assert result.success is False
    assert client.calls == 2


async def test_permanent_error_is_not_retried():
    client = FlakyClient(ValueError("assistant not found"))

    result = await _service(client).create_thread("asst-1")
    assert result.success is False
    assert result.error == "assistant not found"
    assert client.calls == 1


async def test_zero_retries_makes_a_single_attempt():
    client = FlakyClient(RuntimeError("503 service unavailable"))

    result = await _service(client, max_retries=0).create_thread("asst-1")
    assert result.success is False
    assert client.calls == 1
