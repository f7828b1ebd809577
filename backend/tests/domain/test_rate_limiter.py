from datetime import datetime, timedelta, timezone

from tablebook.domain.rate_limiter import RateLimiter

T0 = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def test_allows_up_to_max_attempts_within_window() -> None:
    limiter = RateLimiter()
    results = [limiter.check("reserva_form", 3, 60_000, now=T0 + timedelta(seconds=i)) for i in range(3)]
    assert results == [True, True, True]


def test_fourth_attempt_in_window_is_refused_and_locks() -> None:
    limiter = RateLimiter()
    for i in range(3):
        assert limiter.check("reserva_form", 3, 60_000, now=T0 + timedelta(seconds=i))
    assert limiter.check("reserva_form", 3, 60_000, now=T0 + timedelta(seconds=10)) is False
    assert limiter.locked_until("reserva_form") == T0 + timedelta(seconds=70)


def test_lockout_refuses_even_after_window_contents_expire() -> None:
    limiter = RateLimiter()
    for i in range(4):
        limiter.check("admin_login", 3, 1_000, now=T0 + timedelta(milliseconds=i), lockout_ms=300_000)
    # Window is 1 s but lockout is 5 min.
    assert limiter.check("admin_login", 3, 1_000, now=T0 + timedelta(minutes=2), lockout_ms=300_000) is False
    assert limiter.retry_after("admin_login", now=T0 + timedelta(minutes=2)) > 0


def test_lockout_expires_and_counting_restarts() -> None:
    limiter = RateLimiter()
    for i in range(4):
        limiter.check("k", 3, 60_000, now=T0 + timedelta(seconds=i))
    later = T0 + timedelta(seconds=120)
    assert limiter.check("k", 3, 60_000, now=later) is True
    assert limiter.locked_until("k") is None
    assert len(limiter.state("k").attempts) == 1


def test_attempts_outside_window_do_not_count() -> None:
    limiter = RateLimiter()
    for i in range(3):
        assert limiter.check("k", 3, 60_000, now=T0 + timedelta(seconds=i))
    assert limiter.check("k", 3, 60_000, now=T0 + timedelta(seconds=61)) is True


def test_reset_clears_history_and_lockout() -> None:
    limiter = RateLimiter()
    for i in range(4):
        limiter.check("admin_login", 3, 60_000, now=T0 + timedelta(seconds=i))
    limiter.reset("admin_login")
    assert limiter.locked_until("admin_login") is None
    assert limiter.check("admin_login", 3, 60_000, now=T0 + timedelta(seconds=5)) is True


def test_keys_are_independent() -> None:
    limiter = RateLimiter()
    for i in range(4):
        limiter.check("admin_login", 3, 60_000, now=T0 + timedelta(seconds=i))
    assert limiter.check("reserva_form", 3, 60_000, now=T0 + timedelta(seconds=5)) is True


def test_retry_after_is_zero_when_not_locked() -> None:
    limiter = RateLimiter()
    assert limiter.retry_after("unknown", now=T0) == 0.0


def test_idle_keys_are_evicted() -> None:
    limiter = RateLimiter()
    for i in range(1000):
        limiter.check(f"reserva_form:10.0.{i // 256}.{i % 256}", 3, 60_000, now=T0)
    assert len(limiter) == 1000

    limiter.check("reserva_form:10.9.9.9", 3, 60_000, now=T0 + timedelta(days=1))
    assert len(limiter) == 1


def test_active_and_locked_keys_survive_eviction() -> None:
    limiter = RateLimiter()
    for i in range(4):
        limiter.check("admin_login", 3, 1_000, now=T0 + timedelta(milliseconds=i), lockout_ms=300_000)
    limiter.check("reserva_form:a", 3, 60_000, now=T0 + timedelta(seconds=30))

    limiter.check("reserva_form:b", 3, 60_000, now=T0 + timedelta(seconds=40))

    assert len(limiter) == 3
    assert limiter.locked_until("admin_login") is not None
    assert len(limiter.state("reserva_form:a").attempts) == 1
