"""
Tests for the window registry
"""
import threading
from concurrent import futures

import pytest

from winrpc.rpc.registry import NO_ACTIVE_WINDOW, WindowNotFoundError, WindowRegistry
from winrpc.toolkit.base import WindowHandle
from winrpc.toolkit.headless import HeadlessToolkit


class RecordingToolkit(HeadlessToolkit):
    """Headless toolkit that remembers every destroyed handle"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.destroyed = []

    def destroy_window(self, handle):
        self.destroyed.append(handle)
        super().destroy_window(handle)


class TestCreate:
    """Test identifier allocation"""

    def test_create_assigns_identifier(self, registry, toolkit):
        handle = toolkit.create_window()
        identifier = registry.create(handle)
        assert identifier == "w1"
        assert handle.identifier == "w1"
        assert registry.lookup("w1") is handle

    def test_identifiers_are_never_reused(self, registry, toolkit):
        first = registry.create(toolkit.create_window())
        registry.remove(first)
        second = registry.create(toolkit.create_window())
        assert first != second

    def test_custom_prefix(self, toolkit):
        registry = WindowRegistry(toolkit, identifier_prefix="win-")
        assert registry.create(toolkit.create_window()) == "win-1"

    def test_handle_cannot_be_registered_twice(self, registry, toolkit):
        handle = toolkit.create_window()
        registry.create(handle)
        with pytest.raises(ValueError):
            registry.create(handle)
        assert len(registry) == 1

    def test_concurrent_creates_are_unique(self, registry, toolkit):
        barrier = threading.Barrier(8)

        def create_many():
            barrier.wait()
            return [registry.create(toolkit.create_window()) for _ in range(50)]

        with futures.ThreadPoolExecutor(max_workers=8) as executor:
            results = [f.result() for f in [executor.submit(create_many) for _ in range(8)]]

        identifiers = [identifier for batch in results for identifier in batch]
        assert len(identifiers) == 400
        assert len(set(identifiers)) == 400
        assert len(registry) == 400


class TestLookupAndRemove:
    """Test lookup, remove and release"""

    def test_lookup_unknown(self, registry):
        with pytest.raises(WindowNotFoundError) as excinfo:
            registry.lookup("w99")
        assert excinfo.value.identifier == "w99"
        assert "w99" in str(excinfo.value)

    def test_not_found_is_a_key_error(self, registry):
        with pytest.raises(KeyError):
            registry.remove("nope")

    def test_remove_then_lookup(self, registry, toolkit):
        handle = toolkit.create_window()
        identifier = registry.create(handle)
        assert registry.remove(identifier) is handle
        assert identifier not in registry
        with pytest.raises(WindowNotFoundError):
            registry.lookup(identifier)

    def test_remove_twice(self, registry, toolkit):
        identifier = registry.create(toolkit.create_window())
        registry.remove(identifier)
        with pytest.raises(WindowNotFoundError):
            registry.remove(identifier)

    def test_release_destroys_window(self):
        toolkit = RecordingToolkit()
        registry = WindowRegistry(toolkit)
        handle = toolkit.create_window()
        identifier = registry.create(handle)

        assert registry.release(identifier) is handle
        assert toolkit.destroyed == [handle]
        assert handle.native.destroyed
        assert identifier not in registry

    def test_release_unknown_does_not_touch_toolkit(self):
        toolkit = RecordingToolkit()
        registry = WindowRegistry(toolkit)
        with pytest.raises(WindowNotFoundError):
            registry.release("w1")
        assert toolkit.destroyed == []

    def test_concurrent_release_destroys_once(self):
        toolkit = RecordingToolkit()
        registry = WindowRegistry(toolkit)
        identifier = registry.create(toolkit.create_window())
        barrier = threading.Barrier(4)

        def release():
            barrier.wait()
            try:
                registry.release(identifier)
                return True
            except WindowNotFoundError:
                return False

        with futures.ThreadPoolExecutor(max_workers=4) as executor:
            outcomes = list(executor.map(lambda _: release(), range(4)))

        assert outcomes.count(True) == 1
        assert len(toolkit.destroyed) == 1


class TestFindActive:
    """Test the active-window scan"""

    def test_empty_registry(self, registry):
        assert registry.find_active() == NO_ACTIVE_WINDOW == "-1"

    def test_newest_window_is_active(self, registry, toolkit):
        registry.create(toolkit.create_window())
        second = registry.create(toolkit.create_window())
        assert registry.find_active() == second

    def test_focus_moves_active(self, registry, toolkit):
        first_handle = toolkit.create_window()
        first = registry.create(first_handle)
        registry.create(toolkit.create_window())
        toolkit.focus(first_handle)
        assert registry.find_active() == first

    def test_no_window_focused(self, registry, toolkit):
        registry.create(toolkit.create_window())
        toolkit.blur()
        assert registry.find_active() == NO_ACTIVE_WINDOW

    def test_unregistered_active_window_is_ignored(self, registry, toolkit):
        registry.create(toolkit.create_window())
        toolkit.create_window()  # focused but never registered
        assert registry.find_active() == NO_ACTIVE_WINDOW


class TestDrain:
    """Test shutdown drain"""

    def test_drain_destroys_everything(self):
        toolkit = RecordingToolkit()
        registry = WindowRegistry(toolkit)
        handles = [toolkit.create_window() for _ in range(3)]
        for handle in handles:
            registry.create(handle)

        assert registry.drain() == 3
        assert len(registry) == 0
        assert toolkit.destroyed == handles
        assert toolkit.live_count == 0

    def test_drain_continues_after_failure(self):
        class FlakyToolkit(RecordingToolkit):
            def destroy_window(self, handle):
                if handle.identifier == "w1":
                    raise RuntimeError("widget gone")
                super().destroy_window(handle)

        toolkit = FlakyToolkit()
        registry = WindowRegistry(toolkit)
        registry.create(toolkit.create_window())
        registry.create(toolkit.create_window())

        assert registry.drain() == 2
        assert [h.identifier for h in toolkit.destroyed] == ["w2"]

    def test_drain_empty(self, registry):
        assert registry.drain() == 0

    def test_identifiers_snapshot(self, registry, toolkit):
        registry.create(toolkit.create_window())
        registry.create(toolkit.create_window())
        snapshot = registry.identifiers()
        registry.remove("w1")
        assert sorted(snapshot) == ["w1", "w2"]
        assert registry.identifiers() == ["w2"]


def test_window_handle_identifier_is_immutable():
    handle = WindowHandle(native=object())
    handle.identifier = "w1"
    with pytest.raises(ValueError):
        handle.identifier = "w2"
    assert handle.identifier == "w1"
