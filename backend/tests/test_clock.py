from caro.services.game.clock import TurnClock


def _clock(spawn=None, sleep=None):
    ticks, expiries, spawned = [], [], []

    def _record_spawn(target, *args):
        spawned.append((target, args))

    clock = TurnClock(
        on_tick=ticks.append,
        on_expire=lambda: expiries.append(True),
        spawn=spawn or _record_spawn,
        sleep=sleep or (lambda _s: None),
    )
    return clock, ticks, expiries, spawned


def test_start_emits_initial_value_and_spawns_one_task():
    clock, ticks, _, spawned = _clock()
    clock.start(30)
    assert clock.remaining == 30
    assert clock.running
    assert ticks == [30]
    assert len(spawned) == 1


def test_ticks_count_down_and_expire_once():
    clock, ticks, expiries, _ = _clock()
    clock.start(3)
    assert clock.tick() is True
    assert clock.tick() is True
    assert clock.tick() is False
    assert ticks == [3, 2, 1, 0]
    assert expiries == [True]
    assert not clock.running
    # Nothing more happens after expiry
    assert clock.tick() is False
    assert expiries == [True]
    assert ticks == [3, 2, 1, 0]


def test_stop_is_idempotent_and_cancels_ticks():
    clock, ticks, expiries, _ = _clock()
    clock.start(2)
    clock.stop()
    clock.stop()
    assert not clock.running
    assert clock.tick() is False
    assert ticks == [2]
    assert expiries == []


def test_restart_makes_previous_countdown_stale():
    clock, ticks, expiries, spawned = _clock()
    clock.start(5)
    clock.start(5)
    (old_target, old_args), (_, new_args) = spawned
    assert old_args != new_args
    # The first task sees its generation is stale and exits without ticking
    assert clock.tick(*old_args) is False
    assert ticks == [5, 5]
    assert clock.tick(*new_args) is True
    assert clock.remaining == 4


def test_countdown_task_runs_to_expiry():
    sleeps = []
    clock, ticks, expiries, _ = _clock(spawn=lambda target, *args: target(*args), sleep=sleeps.append)
    clock.start(3)
    assert ticks == [3, 2, 1, 0]
    assert sleeps == [1.0, 1.0, 1.0]
    assert expiries == [True]
    assert not clock.running
