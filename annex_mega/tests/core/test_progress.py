import asyncio

import pytest

from annex_mega.core.progress import ProgressReporter, ProgressStream


@pytest.mark.asyncio
async def test_reporter_emits_running_total_per_increment() -> None:
    totals: list[int] = []

    async with ProgressReporter(totals.append) as stream:
        stream.send(10)
        stream.send(5)
        stream.send(1)

    assert totals == [10, 15, 16]


@pytest.mark.asyncio
async def test_reporter_repeats_total_while_idle() -> None:
    totals: list[int] = []

    async with ProgressReporter(totals.append, interval=0.01) as stream:
        stream.send(7)
        await asyncio.sleep(0.1)

    assert totals[0] == 7
    assert len(totals) >= 2
    assert set(totals) == {7}


@pytest.mark.asyncio
async def test_reporter_emits_nothing_for_empty_fast_transfer() -> None:
    totals: list[int] = []

    async with ProgressReporter(totals.append):
        pass

    assert totals == []


@pytest.mark.asyncio
async def test_reporter_joins_before_exception_propagates() -> None:
    totals: list[int] = []
    reporter = ProgressReporter(totals.append)

    with pytest.raises(RuntimeError, match="upload broke"):
        async with reporter as stream:
            stream.send(3)
            raise RuntimeError("upload broke")

    assert totals == [3]
    assert stream.closed
    assert reporter.total == 3


@pytest.mark.asyncio
async def test_reporter_survives_failing_emit() -> None:
    calls: list[int] = []

    def emit(total: int) -> None:
        calls.append(total)
        raise ValueError("sink closed")

    reporter = ProgressReporter(emit)
    async with reporter as stream:
        stream.send(4)
        stream.send(4)

    assert calls == [4, 8]
    assert reporter.total == 8


@pytest.mark.asyncio
async def test_stream_rejects_send_after_close() -> None:
    stream = ProgressStream()
    stream.close()
    stream.close()

    with pytest.raises(RuntimeError, match="closed"):
        stream.send(1)
    assert await stream.receive() is None


@pytest.mark.asyncio
async def test_factory_builds_fresh_reporter_per_call() -> None:
    totals: list[int] = []
    factory = ProgressReporter.factory(totals.append, 10.0)

    first, second = factory(), factory()
    async with first as stream:
        stream.send(2)
    async with second as stream:
        stream.send(5)

    assert first is not second
    assert totals == [2, 5]
