import asyncio

from spinwheel.timing.asyncio_scheduler import AsyncioScheduler


def test_ticks_then_finish():
    events = []

    async def scenario():
        scheduler = AsyncioScheduler()
        done = asyncio.Event()

        def on_finish():
            events.append("finish")
            done.set()

        handle = scheduler.schedule_ticks(5, 50, lambda: events.append("tick"), on_finish)
        assert handle.active
        await asyncio.wait_for(done.wait(), timeout=5)
        await asyncio.sleep(0)
        assert not handle.active
        await scheduler.close()

    asyncio.run(scenario())

    assert events == ["tick"] * 10 + ["finish"]


def test_cancel_stops_ticker():
    events = []

    async def scenario():
        scheduler = AsyncioScheduler()
        handle = scheduler.schedule_ticks(10, 1000, lambda: events.append("tick"),
                                          lambda: events.append("finish"))
        await asyncio.sleep(0.035)
        scheduler.cancel(handle)
        await asyncio.sleep(0.05)
        count = len(events)
        await asyncio.sleep(0.05)
        assert len(events) == count
        # Cancelling twice or cancelling None is harmless
        scheduler.cancel(handle)
        scheduler.cancel(None)
        await scheduler.close()

    asyncio.run(scenario())

    assert "finish" not in events
    assert len(events) < 100


def test_run_async_delivers_result():
    results = []

    async def work():
        await asyncio.sleep(0.01)
        return 42

    async def scenario():
        scheduler = AsyncioScheduler()
        scheduler.run_async(work(), results.append)
        for _ in range(100):
            if results:
                break
            await asyncio.sleep(0.01)
        await scheduler.close()

    asyncio.run(scenario())

    assert results == [42]


def test_run_async_failure_is_not_delivered():
    results = []

    async def work():
        raise RuntimeError("boom")

    async def scenario():
        scheduler = AsyncioScheduler()
        scheduler.run_async(work(), results.append)
        await asyncio.sleep(0.02)
        await scheduler.close()

    asyncio.run(scenario())

    assert results == []


def test_close_cancels_outstanding_work():
    results = []

    async def slow():
        await asyncio.sleep(10)
        return "late"

    async def scenario():
        scheduler = AsyncioScheduler()
        scheduler.run_async(slow(), results.append)
        handle = scheduler.schedule_ticks(50, 5000, lambda: None, lambda: results.append("finish"))
        await asyncio.sleep(0)
        await scheduler.close()
        await asyncio.sleep(0)
        assert not handle.active

    asyncio.run(scenario())

    assert results == []


def test_finish_waits_for_full_duration():
    # 30 ms does not divide 250 ms: last tick at 240 ms, finish at 250 ms
    marks = {}

    async def scenario():
        scheduler = AsyncioScheduler()
        loop = asyncio.get_running_loop()
        done = asyncio.Event()
        ticks = []

        def on_finish():
            marks["finish"] = loop.time()
            done.set()

        def on_tick():
            ticks.append(loop.time())

        marks["start"] = loop.time()
        scheduler.schedule_ticks(30, 250, on_tick, on_finish)
        await asyncio.wait_for(done.wait(), timeout=5)
        marks["ticks"] = len(ticks)
        await scheduler.close()

    asyncio.run(scenario())

    assert marks["ticks"] == 8
    # Allow for the event loop's clock resolution
    assert marks["finish"] - marks["start"] >= 0.250 - 1e-3
