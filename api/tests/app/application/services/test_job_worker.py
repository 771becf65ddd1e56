import asyncio

from app.application.errors.exceptions import FatalJobError, RetryableJobError
from app.application.services.job_worker import JobWorker
from app.domain.models.job import JobDelivery


def _worker(queue, handler, max_deliveries: int = 5) -> JobWorker:
    return JobWorker(
        queue=queue,
        handler=handler,
        consumer_name="test-consumer",
        block_ms=0,
        max_deliveries=max_deliveries,
    )


def test_success_acks(thumbnail_queue) -> None:
    handled = []

    async def handler(data):
        handled.append(data)

    thumbnail_queue.deliveries.append(JobDelivery(message_id="1-0", data='{"fileId":"f"}'))

    assert asyncio.run(_worker(thumbnail_queue, handler).run_once()) is True
    assert handled == ['{"fileId":"f"}']
    assert thumbnail_queue.acked == ["1-0"]
    assert thumbnail_queue.dead_lettered == []


def test_empty_queue(thumbnail_queue) -> None:
    async def handler(data):
        raise AssertionError("should not be called")

    assert asyncio.run(_worker(thumbnail_queue, handler).run_once()) is False


def test_fatal_error_dead_letters(thumbnail_queue) -> None:
    async def handler(data):
        raise FatalJobError("File not found")

    thumbnail_queue.deliveries.append(JobDelivery(message_id="1-0", data="{}"))
    asyncio.run(_worker(thumbnail_queue, handler).run_once())

    assert thumbnail_queue.dead_lettered == [("1-0", "File not found")]


def test_retryable_error_is_not_acked(thumbnail_queue) -> None:
    async def handler(data):
        raise RetryableJobError("smtp down")

    thumbnail_queue.deliveries.append(JobDelivery(message_id="1-0", data="{}"))
    asyncio.run(_worker(thumbnail_queue, handler).run_once())

    assert thumbnail_queue.acked == []
    assert thumbnail_queue.dead_lettered == []


def test_unexpected_error_is_not_acked(thumbnail_queue) -> None:
    async def handler(data):
        raise OSError("disk full")

    thumbnail_queue.deliveries.append(JobDelivery(message_id="1-0", data="{}"))
    asyncio.run(_worker(thumbnail_queue, handler).run_once())

    assert thumbnail_queue.acked == []


def test_retry_limit_dead_letters_without_handling(thumbnail_queue) -> None:
    async def handler(data):
        raise AssertionError("should not be called")

    thumbnail_queue.deliveries.append(
        JobDelivery(message_id="1-0", data="{}", delivery_count=4)
    )
    asyncio.run(_worker(thumbnail_queue, handler, max_deliveries=3).run_once())

    assert thumbnail_queue.dead_lettered == [("1-0", "retry limit exceeded")]


def test_run_stops_when_event_set(thumbnail_queue) -> None:
    handled = []

    async def main() -> None:
        stop_event = asyncio.Event()

        async def handler(data):
            handled.append(data)
            stop_event.set()

        thumbnail_queue.deliveries.append(JobDelivery(message_id="1-0", data="{}"))
        await asyncio.wait_for(_worker(thumbnail_queue, handler).run(stop_event), timeout=5)

    asyncio.run(main())

    assert handled == ["{}"]
    assert thumbnail_queue.acked == ["1-0"]
