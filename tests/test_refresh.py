import pytest

from weldmaster.services.weld_engine.refresh import refresh_snapshots


@pytest.mark.asyncio
async def test_refresh_frames_never_change_elapsed(session, clock):
    session.start_timer()
    frames = []
    async for snapshot in refresh_snapshots(session, interval=0, limit=50):
        frames.append(snapshot["elapsed_time"])
    # The clock did not move: 50 frames later nothing has accumulated
    assert frames == [0.0] * 50

    clock.advance(2.5)
    session.stop_timer()
    assert session.elapsed == pytest.approx(2.5)


@pytest.mark.asyncio
async def test_refresh_tracks_clock(session, clock):
    session.start_timer()
    readings = []
    async for snapshot in refresh_snapshots(session, interval=0, limit=4):
        readings.append(snapshot["elapsed_time"])
        clock.advance(0.5)
    assert readings == pytest.approx([0.0, 0.5, 1.0, 1.5])


@pytest.mark.asyncio
async def test_refresh_until_stopped_ends_after_stop(session):
    frames = [s async for s in refresh_snapshots(session, interval=0, until_stopped=True)]
    assert len(frames) == 1
    assert frames[0]["is_running"] is False


@pytest.mark.asyncio
async def test_refresh_does_not_notify_observers(session):
    calls = []
    session.subscribe(lambda s: calls.append(s))
    async for _ in refresh_snapshots(session, interval=0, limit=10):
        pass
    assert calls == []
