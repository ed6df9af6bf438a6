from wallet_bot.vault import PendingStore


def test_pop_returns_value_once(clock):
    store = PendingStore(ttl_seconds=300, clock=clock)
    token = store.put(1, "value")

    assert store.pop(token, 1) == "value"
    assert store.pop(token, 1) is None


def test_pop_rejects_other_owner_without_consuming(clock):
    store = PendingStore(ttl_seconds=300, clock=clock)
    token = store.put(1, "value")

    assert store.pop(token, 2) is None
    assert store.pop(token, 1) == "value"


def test_expired_token_returns_none(clock):
    store = PendingStore(ttl_seconds=300, clock=clock)
    token = store.put(1, "value")

    clock.advance(seconds=300)

    assert store.pop(token, 1) is None


def test_put_purges_expired_entries(clock):
    store = PendingStore(ttl_seconds=60, clock=clock)
    store.put(1, "old")
    clock.advance(seconds=61)
    store.put(1, "new")

    assert len(store) == 1


def test_discard_owner_removes_only_that_owner(clock):
    store = PendingStore(ttl_seconds=300, clock=clock)
    mine = store.put(1, "a")
    theirs = store.put(2, "b")

    store.discard_owner(1)

    assert store.pop(mine, 1) is None
    assert store.pop(theirs, 2) == "b"


def test_tokens_are_short_and_distinct(clock):
    store = PendingStore(clock=clock)
    tokens = {store.put(1, i) for i in range(50)}
    assert len(tokens) == 50
    assert all(len(t) <= 16 and ":" not in t for t in tokens)


def test_peek_does_not_consume(clock):
    store = PendingStore(ttl_seconds=300, clock=clock)
    token = store.put(1, "value")

    assert store.peek(token, 2) is None
    assert store.peek(token, 1) == "value"
    assert store.pop(token, 1) == "value"
    assert store.peek(token, 1) is None
