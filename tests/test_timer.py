from loraigate.timer import Timer


class FakeMillis:
    def __init__(self, value=1):
        self.value = value

    def __call__(self):
        return self.value


def test_inactive_timer_fires_immediately():
    ms = FakeMillis()
    timer = Timer(ms)
    assert not timer.is_active()
    assert timer.check()


def test_start_and_expire():
    ms = FakeMillis()
    timer = Timer(ms)
    timer.set_timeout(5000)
    timer.start()
    assert timer.is_active()
    assert not timer.check()
    ms.value += 5000
    assert not timer.check()
    ms.value += 1
    assert timer.check()


def test_trigger_time_counts_down():
    ms = FakeMillis()
    timer = Timer(ms)
    timer.set_timeout(10000)
    timer.start()
    assert timer.trigger_time_in_sec() == 10
    ms.value += 3500
    assert timer.trigger_time_in_sec() == 6


def test_trigger_time_wraps_after_expiry():
    ms = FakeMillis()
    timer = Timer(ms)
    timer.set_timeout(1000)
    timer.start()
    ms.value += 2000
    assert timer.trigger_time_in_sec() == (2 ** 32 - 1000) // 1000


def test_reset_deactivates():
    ms = FakeMillis()
    timer = Timer(ms)
    timer.set_timeout(1000)
    timer.start()
    timer.reset()
    assert not timer.is_active()
    assert timer.check()