from storefront.api.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_limit_then_blocks():
    clock = FakeClock()
    limiter = RateLimiter(3, 60, clock=clock)
    assert [limiter.check("1.2.3.4")[0] for _ in range(3)] == [True, True, True]
    allowed, retry_after = limiter.check("1.2.3.4")
    assert allowed is False
    assert retry_after == 60
    # other clients are counted separately
    assert limiter.check("5.6.7.8")[0] is True


def test_window_resets():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    assert limiter.check("k")[0] is True
    clock.now += 30
    allowed, retry_after = limiter.check("k")
    assert not allowed and retry_after == 30
    clock.now += 30
    assert limiter.check("k")[0] is True


def test_zero_limit_disables():
    limiter = RateLimiter(0, 60)
    assert all(limiter.check("k")[0] for _ in range(500))


def test_reset_clears_counters():
    limiter = RateLimiter(1, 60)
    limiter.check("k")
    assert limiter.check("k")[0] is False
    limiter.reset()
    assert limiter.check("k")[0] is True


def test_expired_clients_are_dropped():
    clock = FakeClock()
    limiter = RateLimiter(5, 60, clock=clock)
    for i in range(1000):
        limiter.check(f"10.0.{i // 256}.{i % 256}")
    assert limiter.tracked_clients() == 1000
    clock.now += 61
    limiter.check("192.168.0.1")
    assert limiter.tracked_clients() == 1


def test_sweep_keeps_clients_inside_their_window():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    limiter.check("old")
    clock.now += 50
    assert limiter.check("recent")[0] is True
    clock.now += 20
    # "old" expired at +60; "recent" is still 30s into its window
    limiter.check("other")
    assert limiter.tracked_clients() == 2
    allowed, retry_after = limiter.check("recent")
    assert not allowed and retry_after == 40
