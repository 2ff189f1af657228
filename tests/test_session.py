import threading

import pytest

from vzlogger.session import SessionProvider


class Closable:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_same_session_returned_for_key():
    provider = SessionProvider(factory=Closable)
    first = provider.get_session("a")
    provider.return_session("a", first)
    second = provider.get_session("a")
    assert second is first


def test_different_keys_get_different_sessions():
    provider = SessionProvider(factory=Closable)
    assert provider.get_session("a") is not provider.get_session("b")


def test_in_use_tracking():
    provider = SessionProvider(factory=Closable)
    assert provider.in_use("a") is False
    session = provider.get_session("a")
    assert provider.in_use("a") is True
    provider.return_session("a", session)
    assert provider.in_use("a") is False


def test_return_wrong_session_raises():
    provider = SessionProvider(factory=Closable)
    provider.get_session("a")
    with pytest.raises(ValueError):
        provider.return_session("a", Closable())


def test_return_unknown_key_raises():
    provider = SessionProvider(factory=Closable)
    with pytest.raises(ValueError):
        provider.return_session("missing", Closable())


def test_second_user_blocks_until_returned():
    provider = SessionProvider(factory=Closable)
    session = provider.get_session("a")
    got = []
    done = threading.Event()

    def worker():
        got.append(provider.get_session("a"))
        done.set()

    thread = threading.Thread(target=worker)
    thread.start()
    assert done.wait(0.1) is False
    provider.return_session("a", session)
    assert done.wait(2.0) is True
    thread.join()
    assert got == [session]
    assert provider.in_use("a") is True


def test_close_closes_sessions():
    provider = SessionProvider(factory=Closable)
    session = provider.get_session("a")
    provider.return_session("a", session)
    provider.close()
    assert session.closed is True
    with pytest.raises(RuntimeError):
        provider.get_session("a")


def test_close_gives_up_waiting_for_sessions_in_use():
    provider = SessionProvider(factory=Closable, close_timeout=0.05)
    session = provider.get_session("a")
    provider.close()
    assert session.closed is True
    assert provider.in_use("a") is False


def test_context_manager_closes():
    with SessionProvider(factory=Closable) as provider:
        session = provider.get_session("k")
        provider.return_session("k", session)
    assert session.closed is True