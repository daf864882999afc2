from notesplus.services.autosave import AutoSaver


class FakeScheduler:
    def __init__(self):
        self.pending = {}
        self.cancelled = []
        self._next = 0

    def after(self, ms, func):  # noqa: ANN001
        self._next += 1
        after_id = f"after#{self._next}"
        self.pending[after_id] = (ms, func)
        return after_id

    def after_cancel(self, after_id):  # noqa: ANN001
        self.cancelled.append(after_id)
        self.pending.pop(after_id, None)

    def run_all(self):
        for after_id in list(self.pending):
            _, func = self.pending.pop(after_id)
            func()


def test_burst_of_changes_saves_once():
    sched = FakeScheduler()
    saves = []
    saver = AutoSaver(sched, lambda: saves.append(1), delay_ms=2000)
    for _ in range(10):
        saver.schedule()
    assert len(sched.pending) == 1
    assert len(sched.cancelled) == 9
    assert [ms for ms, _ in sched.pending.values()] == [2000]
    sched.run_all()
    assert saves == [1]
    assert saver.pending is False


def test_cancel_drops_pending_save():
    sched = FakeScheduler()
    saves = []
    saver = AutoSaver(sched, lambda: saves.append(1))
    saver.schedule()
    saver.cancel()
    sched.run_all()
    assert saves == []


def test_flush_runs_pending_save_now():
    sched = FakeScheduler()
    saves = []
    saver = AutoSaver(sched, lambda: saves.append(1))
    saver.flush()
    assert saves == []
    saver.schedule()
    saver.flush()
    assert saves == [1]
    assert sched.pending == {}


def test_failing_save_is_logged_not_raised(caplog):
    sched = FakeScheduler()

    def boom():
        raise OSError("disk full")

    saver = AutoSaver(sched, boom)
    saver.schedule()
    sched.run_all()
    assert "Auto-save failed" in caplog.text
