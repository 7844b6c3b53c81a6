import asyncio
import threading

from chat.session_store import SYSTEM_PROMPT, SessionStore, SessionSweeper, Turn


def test_create_holds_only_system_turn(store):
    session = store.create()

    assert session.id in store
    assert store.get(session.id) == [Turn(role="system", content=SYSTEM_PROMPT)]


def test_ids_are_unique_and_increasing_under_frozen_clock(store):
    ids = [store.create().id for _ in range(5)]

    assert len(set(ids)) == 5
    assert [int(i) for i in ids] == sorted(int(i) for i in ids)


def test_ids_not_reused_after_delete(store):
    first = store.create().id
    store.delete(first)

    assert store.create().id != first


def test_id_embeds_creation_time_in_millis(clock):
    store = SessionStore(clock=clock)

    assert store.create().id == str(int(clock.now * 1000))


def test_get_unknown_returns_none_and_does_not_create(store):
    assert store.get("nope") is None
    assert "nope" not in store
    assert len(store) == 0


def test_get_returns_copy(store):
    session = store.create()
    transcript = store.get(session.id)
    transcript.append(Turn(role="user", content="hi"))

    assert len(store.get(session.id)) == 1


def test_put_overwrites_and_keeps_created_at(store, clock):
    session = store.create()
    clock.advance(100)
    store.put(session.id, [*store.get(session.id), Turn(role="user", content="hi")])

    assert len(store.get(session.id)) == 2
    # Age still counts from the original creation
    assert store.sweep(max_age=100) == [session.id]


def test_put_creates_unknown_id(store):
    store.put("client-picked", [Turn(role="system", content=SYSTEM_PROMPT)])

    assert "client-picked" in store


def test_delete_is_idempotent(store):
    session = store.create()

    assert store.delete(session.id) is True
    assert store.delete(session.id) is False
    assert store.delete("never-existed") is False


def test_sweep_removes_only_expired(store, clock):
    old = store.create().id
    clock.advance(3000)
    young = store.create().id
    clock.advance(700)

    assert store.sweep(max_age=3600) == [old]
    assert young in store
    assert old not in store


def test_sweep_zero_max_age_removes_everything(store):
    for _ in range(3):
        store.create()
    store.put("other", [Turn(role="system", content=SYSTEM_PROMPT)])

    removed = store.sweep(max_age=0)

    assert len(removed) == 4
    assert len(store) == 0


def test_sweeper_run_once(store, clock):
    store.create()
    clock.advance(7200)

    sweeper = SessionSweeper(store, max_age=3600)

    assert len(sweeper.run_once()) == 1
    assert len(store) == 0


def test_sweeper_loop_sweeps_each_interval(store, clock):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 1:
            store.create()
            clock.advance(10)
        elif len(sleeps) == 3:
            raise asyncio.CancelledError

    sweeper = SessionSweeper(store, max_age=5, interval=60, sleep=fake_sleep)

    async def run():
        try:
            await sweeper.run()
        except asyncio.CancelledError:
            pass

    asyncio.run(run())

    assert sleeps == [60, 60, 60]
    assert len(store) == 0


def test_sweeper_loop_survives_failing_sweep(store, monkeypatch):
    calls = []

    def broken_sweep(max_age):
        calls.append(max_age)
        raise RuntimeError("boom")

    monkeypatch.setattr(store, "sweep", broken_sweep)

    async def fake_sleep(seconds):
        if len(calls) == 2:
            raise asyncio.CancelledError

    sweeper = SessionSweeper(store, max_age=1, interval=1, sleep=fake_sleep)

    async def run():
        try:
            await sweeper.run()
        except asyncio.CancelledError:
            pass

    asyncio.run(run())

    assert calls == [1, 1]


def test_sweep_while_other_thread_writes(store, clock):
    for i in range(20_000):
        store.put(f"s{i}", [Turn(role="system", content=SYSTEM_PROMPT)])

    stop = threading.Event()

    def writer():
        n = 0
        while not stop.is_set():
            store.put(f"w{n}", [Turn(role="system", content=SYSTEM_PROMPT)])
            store.create()
            n += 1

    thread = threading.Thread(target=writer)
    thread.start()
    errors = []
    try:
        for _ in range(30):
            try:
                store.sweep(max_age=10_000)
            except RuntimeError as e:
                errors.append(str(e))
    finally:
        stop.set()
        thread.join()

    assert errors == []
    clock.advance(10_000)
    store.sweep(max_age=10_000)
    assert len(store) == 0
