"""
Tests unitaires Network - RetryHandler

Retry automatique (3 tentatives par défaut) avec backoff exponentiel.
"""

from unittest.mock import AsyncMock, patch

import pytest

from juice_admin.network import IRetryHandler, RetryConfig, RetryHandler


class TestRetryWithBackoff:
    """Tentatives et backoff."""

    def test_implements_interface(self) -> None:
        assert isinstance(RetryHandler(), IRetryHandler)

    @pytest.mark.asyncio
    async def test_default_max_attempts_is_3(self) -> None:
        handler = RetryHandler()
        call_count = 0

        async def failing_func() -> None:
            nonlocal call_count
            call_count += 1
            raise ConnectionError("refused")

        with patch("asyncio.sleep", new_callable=AsyncMock):
            result = await handler.execute_with_retry(failing_func)

        assert call_count == 3
        assert result.attempts == 3
        assert result.success is False
        assert isinstance(result.last_error, ConnectionError)

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self) -> None:
        async def success_func() -> str:
            return "success"

        result = await RetryHandler().execute_with_retry(success_func)

        assert result.success is True
        assert result.result == "success"
        assert result.attempts == 1
        assert result.total_delay == 0.0

    @pytest.mark.asyncio
    async def test_success_after_retry(self) -> None:
        handler = RetryHandler()
        call_count = 0

        async def eventual_success() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise TimeoutError("slow")
            return "success"

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await handler.execute_with_retry(eventual_success)

        assert result.success is True
        assert result.attempts == 2
        sleep.assert_awaited_once_with(1.0)
        assert handler.get_retry_stats()["successful_retries"] == 1

    @pytest.mark.asyncio
    async def test_non_retryable_stops_immediately(self) -> None:
        call_count = 0

        async def bad_input() -> None:
            nonlocal call_count
            call_count += 1
            raise ValueError("bad")

        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await RetryHandler().execute_with_retry(bad_input)

        assert call_count == 1
        assert result.success is False
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delays_are_exponential(self) -> None:
        async def failing_func() -> None:
            raise ConnectionError("refused")

        config = RetryConfig(max_attempts=4, initial_delay=1.0, exponential_base=2.0, max_delay=10.0)
        with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await RetryHandler().execute_with_retry(failing_func, config=config)

        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0, 4.0]
        assert result.total_delay == 7.0

    def test_calculate_delay_capped(self) -> None:
        config = RetryConfig(initial_delay=1.0, exponential_base=2.0, max_delay=10.0)
        handler = RetryHandler()

        assert handler.calculate_delay(0, config) == 1.0
        assert handler.calculate_delay(1, config) == 2.0
        assert handler.calculate_delay(5, config) == 10.0

    def test_invalid_max_attempts(self) -> None:
        with pytest.raises(ValueError):
            RetryHandler(RetryConfig(max_attempts=0))

    def test_reset_stats(self) -> None:
        handler = RetryHandler()

        handler.reset_stats()

        assert handler.get_retry_stats() == {"total_retries": 0, "successful_retries": 0, "failed_retries": 0}
