import logging

from recordconfig.core.shutdown import ShutdownHooks, get_shutdown_hooks


def test_callbacks_run_once_in_order():
    hooks = ShutdownHooks()
    calls = []
    hooks.register(lambda: calls.append("a"))
    hooks.register(lambda: calls.append("b"))

    hooks.run()
    hooks.run()

    assert calls == ["a", "b"]


def test_duplicate_registration_is_ignored():
    hooks = ShutdownHooks()
    calls = []

    def callback():
        calls.append(1)

    hooks.register(callback)
    hooks.register(callback)
    hooks.run()
    assert calls == [1]


def test_failing_callback_is_logged_and_others_still_run(caplog):
    hooks = ShutdownHooks()
    calls = []

    def broken():
        raise RuntimeError("disk gone")

    hooks.register(broken)
    hooks.register(lambda: calls.append("after"))

    with caplog.at_level(logging.ERROR, logger="recordconfig"):
        hooks.run()

    assert calls == ["after"]
    assert "broken" in caplog.text


def test_unregister_removes_callback():
    hooks = ShutdownHooks()
    calls = []

    def callback():
        calls.append(1)

    hooks.register(callback)
    hooks.unregister(callback)
    hooks.run()
    assert calls == []


def test_default_hooks_are_shared():
    assert get_shutdown_hooks() is get_shutdown_hooks()
