import asyncio

import pytest

from algota.scheduler import Poller


def test_runs_job_max_runs_times():
    calls = []

    async def job():
        calls.append(len(calls))

    poller = Poller(job, interval_seconds=0, max_runs=3)
    asyncio.run(poller.run())

    assert calls == [0, 1, 2]
    assert poller.runs == 3
    assert poller.failures == 0


def test_failed_run_does_not_stop_polling():
    calls = []

    async def job():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("provider down")

    poller = Poller(job, interval_seconds=0, max_runs=2)
    asyncio.run(poller.run())

    assert len(calls) == 2
    assert poller.failures == 1


def test_stop_ends_loop_without_waiting_full_interval():
    async def job():
        pass

    poller = Poller(job, interval_seconds=3600)

    async def main():
        task = asyncio.create_task(poller.run())
        await asyncio.sleep(0.05)
        poller.stop()
        await asyncio.wait_for(task, timeout=5)

    asyncio.run(main())
    assert poller.runs == 1


def test_each_run_awaits_a_fresh_job_call():
    results = []
    counter = {"n": 0}

    async def job():
        counter["n"] += 1
        await asyncio.sleep(0)
        results.append(counter["n"])

    asyncio.run(Poller(job, interval_seconds=0.01, max_runs=3).run())

    assert results == [1, 2, 3]


def test_negative_interval_rejected():
    async def job():
        pass

    with pytest.raises(ValueError):
        Poller(job, interval_seconds=-1)
