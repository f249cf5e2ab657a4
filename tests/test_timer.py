from irontrack.session import RestTimer


def test_start_and_tick_to_zero():
    timer = RestTimer()
    timer.start(3, now=100.0)
    assert timer.active and timer.remaining == 3 and timer.total == 3

    assert timer.tick() is True
    assert timer.tick() is True
    assert timer.tick() is False
    assert timer.remaining == 0
    assert not timer.active
    # ticking an idle timer does nothing
    assert timer.tick() is False
    assert timer.remaining == 0


def test_zero_seconds_never_activates():
    timer = RestTimer()
    timer.start(0, now=0.0)
    assert not timer.active
    assert timer.remaining == 0


def test_sync_applies_elapsed_seconds():
    timer = RestTimer()
    timer.start(60, now=1000.0)
    timer.sync(now=1010.5)
    assert timer.remaining == 50
    assert timer.last_tick_at == 1010.0

    # the half second left over carries into the next sync
    timer.sync(now=1011.0)
    assert timer.remaining == 49


def test_sync_past_the_end_stops():
    timer = RestTimer()
    timer.start(5, now=0.0)
    assert timer.sync(now=500.0) is False
    assert timer.remaining == 0
    assert not timer.active


def test_restart_replaces_running_countdown():
    timer = RestTimer()
    timer.start(90, now=0.0)
    timer.sync(now=40.0)
    timer.start(60, now=40.0)
    assert timer.remaining == 60
    assert timer.total == 60


def test_skip_and_format():
    timer = RestTimer()
    timer.start(75, now=0.0)
    assert timer.format_remaining() == "1:15"
    timer.skip()
    assert not timer.active
    assert timer.format_remaining() == "0:00"


def test_dict_round_trip_keeps_deadline():
    timer = RestTimer()
    timer.start(60, now=10.0)
    restored = RestTimer.from_dict(timer.to_dict())
    restored.sync(now=20.0)
    assert restored.remaining == 50
    assert RestTimer.from_dict(None).active is False
