"""
Tests for the Qt ViewModels (no widgets, QCoreApplication only).
"""

import pytest

pytest.importorskip("PyQt6.QtCore")

from PyQt6.QtCore import QCoreApplication

from agentgraph_app.config import AppConfig
from agentgraph_app.viewmodels import AppCoordinator, GraphVM, PaginationVM
from agentgraph_core.domain.enums import NodeEmphasis
from agentgraph_core.domain.models import Rect

from conftest import make_snapshot


@pytest.fixture(scope="session")
def qt_app():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def graph_vm(qt_app):
    vm = GraphVM(AppConfig())
    yield vm
    vm.stop()


@pytest.fixture
def pagination_vm(qt_app, memory_source):
    return PaginationVM(memory_source, "g", threaded=False)


class TestGraphVM:
    """Layout loop and input commands."""

    def test_set_snapshot_emits_and_ticks(self, graph_vm, chain_snapshot):
        events = []
        graph_vm.dataset_changed.connect(lambda: events.append("dataset"))
        graph_vm.frame_ready.connect(lambda frame: events.append("frame"))

        graph_vm.set_snapshot(chain_snapshot)

        assert events == ["dataset", "frame"]
        assert len(graph_vm.frame.nodes) == 3

    def test_first_dataset_resets_view(self, graph_vm, chain_snapshot):
        transforms = []
        graph_vm.transform_changed.connect(transforms.append)
        graph_vm.set_snapshot(chain_snapshot)
        graph_vm.set_snapshot(make_snapshot(["X"], []))
        assert len(transforms) == 1
        assert transforms[0].scale == graph_vm.viewport.settings.initial_scale

    def test_hover_and_leave(self, graph_vm, chain_snapshot):
        graph_vm.set_snapshot(chain_snapshot)
        changes = []
        graph_vm.highlight_changed.connect(lambda: changes.append("highlight"))

        graph_vm.node_entered("A", Rect(0, 50, 40, 40))
        assert graph_vm.highlight.node_emphasis("C") == NodeEmphasis.DIM
        assert graph_vm.tooltip.anchor == (20, 40)

        graph_vm.node_left("A")
        assert graph_vm.highlight.is_empty
        assert changes == ["highlight", "highlight"]

    def test_new_dataset_clears_hover(self, graph_vm, chain_snapshot):
        graph_vm.set_snapshot(chain_snapshot)
        graph_vm.node_entered("B")
        graph_vm.set_snapshot(make_snapshot(["X"], []))
        assert graph_vm.highlight.is_empty
        assert not graph_vm.tooltip.visible

    def test_drag_changes_cadence(self, graph_vm, chain_snapshot):
        graph_vm.set_snapshot(chain_snapshot)
        for _ in range(310):
            graph_vm.tick()
        assert graph_vm.tick_interval == graph_vm._config.idle_tick_ms

        graph_vm.pointer_down("A", 100, 100)
        assert graph_vm.tick_interval == graph_vm._config.hot_tick_ms
        graph_vm.pointer_move(120, 130)
        assert graph_vm.engine.node("A").pinned

        graph_vm.pointer_up()
        assert not graph_vm.engine.node("A").pinned

    def test_pointer_move_does_not_step_layout(self, graph_vm, chain_snapshot):
        graph_vm.set_snapshot(chain_snapshot)
        graph_vm.pointer_down("A", 100, 100)
        ticks = graph_vm.engine.tick_count

        for x in range(110, 200, 10):
            graph_vm.pointer_move(x, 130)

        assert graph_vm.engine.tick_count == ticks
        node = graph_vm.engine.node("A")
        assert (node.fx, node.fy) == graph_vm.viewport.to_world(190, 130)

    def test_resize_ignores_empty_size(self, graph_vm):
        graph_vm.resize(0, 100)
        assert graph_vm.engine.viewport_size.width == 800
        graph_vm.resize(1000, 700)
        assert graph_vm.viewport.size.width == 1000

    def test_wheel_emits_transform(self, graph_vm):
        transforms = []
        graph_vm.transform_changed.connect(transforms.append)
        graph_vm.wheel(-120, 400, 300)
        graph_vm.pan(10, 0)
        assert len(transforms) == 2
        assert transforms[-1] == graph_vm.transform


class TestPaginationVM:
    """Paging commands with inline fetches."""

    def test_load_first_page(self, pagination_vm):
        snapshots = []
        pagination_vm.snapshot_ready.connect(snapshots.append)
        pagination_vm.load_page(1)
        assert [s.page_index for s in snapshots] == [1]
        assert pagination_vm.has_next_page
        assert not pagination_vm.is_loading

    def test_previous_at_start(self, pagination_vm, memory_source):
        pagination_vm.load_page(1)
        memory_source.fetch_log.clear()
        assert pagination_vm.previous_page() is False
        assert memory_source.fetch_log == []

    def test_failure_reported(self, pagination_vm, memory_source):
        errors = []
        pagination_vm.error_occurred.connect(errors.append)
        pagination_vm.load_page(1)
        memory_source.fail_page("g", 2)

        assert pagination_vm.next_page() is True
        assert pagination_vm.page_index == 1
        assert errors and errors[0].startswith("Could not load page 2")

    def test_loading_signals(self, pagination_vm):
        states = []
        pagination_vm.loading_changed.connect(states.append)
        pagination_vm.load_page(1)
        assert states == [True, False]


class TestAppCoordinator:
    """Pages flow into the graph."""

    def test_page_reaches_graph(self, graph_vm, pagination_vm):
        coordinator = AppCoordinator(graph_vm, pagination_vm)
        messages = []
        coordinator.status_message.connect(lambda text, timeout: messages.append(text))

        pagination_vm.load_page(1)

        assert {n.node_id for n in graph_vm.engine.nodes} == {"a1", "a2"}
        assert messages[-1] == "Page 1 of 3 | Nodes: 2 | Links: 1"

    def test_error_message(self, graph_vm, pagination_vm, memory_source):
        coordinator = AppCoordinator(graph_vm, pagination_vm)
        messages = []
        coordinator.status_message.connect(lambda text, timeout: messages.append((text, timeout)))

        memory_source.fail_page("g", 1)
        pagination_vm.load_page(1)

        assert messages[-1][1] == 8000
        assert graph_vm.engine.nodes == ()
