from datetime import datetime, timedelta, timezone

from custom_components.light_energy.token_cache import TokenCache

START = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def test_token_returned_while_outside_buffer():
    clock = FakeClock(START)
    cache = TokenCache(clock=clock)
    cache.set_token("A", "t1", START + timedelta(minutes=10))

    assert cache.get_token("A") == "t1"
    clock.advance(minutes=4, seconds=59)
    assert cache.get_token("A") == "t1"


def test_token_withheld_inside_buffer_before_expiry():
    clock = FakeClock(START)
    cache = TokenCache(clock=clock)
    cache.set_token("A", "t1", START + timedelta(minutes=10))

    clock.advance(minutes=5)
    assert not cache.is_valid("A")
    assert cache.get_token("A") is None
    assert cache.expires_at == START + timedelta(minutes=10)


def test_token_for_other_account_is_absent():
    cache = TokenCache(clock=FakeClock(START))
    cache.set_token("A", "t1", START + timedelta(hours=1))

    assert cache.get_token("B") is None


def test_set_token_replaces_previous_account():
    cache = TokenCache(clock=FakeClock(START))
    cache.set_token("A", "t1", START + timedelta(hours=1))
    cache.set_token("B", "t2", START + timedelta(hours=1))

    assert cache.get_token("A") is None
    assert cache.get_token("B") == "t2"


def test_clear_if_expired_uses_raw_expiry():
    clock = FakeClock(START)
    cache = TokenCache(clock=clock)
    cache.set_token("A", "t1", START + timedelta(minutes=10))

    clock.advance(minutes=6)
    cache.clear_if_expired()
    assert cache.expires_at is not None

    clock.advance(minutes=4)
    cache.clear_if_expired()
    assert cache.expires_at is None


def test_iso_expiry_strings():
    cache = TokenCache(clock=FakeClock(START))
    cache.set_token("A", "t1", "2025-01-01T13:00:00Z")
    assert cache.get_token("A") == "t1"

    cache.set_token("A", "t2", "2025-01-01T12:04:00+00:00")
    assert cache.get_token("A") is None


def test_naive_expiry_is_treated_as_utc():
    cache = TokenCache(clock=FakeClock(START))
    cache.set_token("A", "t1", datetime(2025, 1, 1, 13, 0))
    assert cache.get_token("A") == "t1"


def test_unparseable_expiry_is_never_valid():
    cache = TokenCache(clock=FakeClock(START))
    cache.set_token("A", "t1", "soon")

    assert cache.get_token("A") is None
    assert cache.expires_at is None
    cache.clear_if_expired()
    assert cache.get_token("A") is None

    cache.set_token("A", "t2", START + timedelta(hours=1))
    assert cache.get_token("A") == "t2"


def test_clear_token():
    cache = TokenCache(clock=FakeClock(START))
    cache.set_token("A", "t1", START + timedelta(hours=1))
    cache.clear_token()

    assert cache.get_token("A") is None
    assert cache.expires_at is None
