"""
Main NiceGUI application for GraphBoard.

Renders the session graph as SVG inside ui.interactive_image, routes mouse,
wheel and keyboard events to the tool controller, and exposes tools,
layouts, algorithms and import/export through a toolbar.
"""

import logging
import sys
from typing import Optional

from dotenv import load_dotenv
from nicegui import ui

load_dotenv()

from graphboard import constants
from graphboard.algorithms import ALGORITHMS, build_adjacency, bfs, run_algorithm
from graphboard.cache import load_from_cache
from graphboard.config import get_editor_config
from graphboard.errors import GraphFormatError
from graphboard.export import to_dot_source
from graphboard.handlers import setup_canvas_handlers
from graphboard.highlight import describe_result, show_result
from graphboard.history import redo, undo
from graphboard.layout import (
    circular_arrange,
    focus_on_all,
    grid_arrange,
    organic_arrange,
    sequence_arrange,
    toposort_arrange,
    tree_arrange,
)
from graphboard.paths import ensure_data_dir
from graphboard.render import render_content
from graphboard.serialization import (
    URL_LINE_SEPARATOR,
    load_edge_list,
    load_record,
    to_edge_list,
    to_share_url,
)
from graphboard.state import GraphState
from graphboard.tools import create_tool_controller

config = get_editor_config()
logging.basicConfig(
    level=getattr(logging, config.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("graphboard.app")

# Ensure required directories exist on startup
ensure_data_dir()

ui.add_head_html('''
    <style>
        body { margin: 0; padding: 0; overflow: hidden; }
        .graphboard-canvas { cursor: default; user-select: none; }
    </style>
''', shared=True)

TOOL_ICONS = {
    "select": "near_me",
    "add-nodes": "add_circle",
    "edges": "timeline",
    "delete": "delete",
    "drag": "pan_tool",
    "edit": "edit",
}

# Algorithms whose failure is a property of the graph, not a bug in the request
SOFT_ERRORS = {"empty-graph", "no-solution"}


def load_initial_graph(state: GraphState, graph: Optional[str]) -> None:
    """Shared URL graph first, then the local cache, then the demo graph."""
    if graph:
        try:
            load_edge_list(state, graph.replace(URL_LINE_SEPARATOR, "\n"))
            return
        except GraphFormatError as e:
            logger.warning(f"Ignoring shared graph: {e}")
            ui.notify(f"Shared graph is invalid: {e}", type="negative")
    if load_from_cache(state):
        return
    load_record(state, constants.TEMPLATE_GRAPH)


def show_edge_list_dialog(state: GraphState, on_loaded) -> None:
    """Edit the graph as an edge list; invalid text leaves the graph untouched."""
    with ui.dialog() as dialog, ui.card().classes('w-[480px]'):
        ui.label('Edge list').classes('text-lg font-bold')
        ui.label('One per line: A, A-B, A-{5}-B, A->B, A-{5}->B').classes('text-gray-500 text-sm')
        try:
            current = to_edge_list(state)
        except GraphFormatError:
            current = ""
        text = ui.textarea(value=current).props('outlined autogrow').classes('w-full font-mono')
        status = ui.label('').classes('text-sm text-red-500')

        def do_load():
            try:
                load_edge_list(state, text.value or "")
            except GraphFormatError as e:
                status.text = str(e)
                return
            dialog.close()
            on_loaded()

        with ui.row().classes('w-full justify-end'):
            ui.button('Cancel', on_click=dialog.close).props('flat')
            ui.button('Load', on_click=do_load).props('color=primary')
    dialog.open()


def show_text_dialog(title: str, content: str) -> None:
    with ui.dialog() as dialog, ui.card().classes('w-[560px]'):
        ui.label(title).classes('text-lg font-bold')
        ui.textarea(value=content).props('outlined readonly autogrow').classes('w-full font-mono')
        with ui.row().classes('w-full justify-end'):
            ui.button('Copy', on_click=lambda: ui.clipboard.write(content)).props('flat')
            ui.button('Close', on_click=dialog.close).props('color=primary')
    dialog.open()


@ui.page('/')
def main_page(graph: Optional[str] = None):
    state = GraphState(config)
    controller = create_tool_controller(state)
    width, height = constants.CANVAS_WIDTH, constants.CANVAS_HEIGHT

    load_initial_graph(state, graph)
    # The initial load is not something to undo
    state.memento = []
    state.memento_redo = []
    focus_on_all(state, controller.viewport, width, height)

    def redraw() -> None:
        canvas.content = render_content(state, width, height, controller.viewport)
        canvas.style(f'cursor: {state.cursor}')

    handlers = setup_canvas_handlers(state, controller, redraw)
    canvas = ui.interactive_image(
        size=(width, height),
        on_mouse=handlers['handle_mouse'],
        events=['mousedown', 'mouseup', 'mousemove', 'dblclick'],
        cross=False,
    ).classes('graphboard-canvas')
    canvas.on('wheel', handlers['handle_wheel'], ['deltaY', 'offsetX', 'offsetY'])
    canvas.on('mouseleave', handlers['handle_blur'])
    ui.keyboard(on_key=handlers['handle_keyboard'])
    ui.timer(1.0, handlers['flush_cache'])

    def refocus() -> None:
        focus_on_all(state, controller.viewport, width, height)
        redraw()

    def run(name: str) -> None:
        outcome = run_algorithm(name, state, start_select.value)
        if outcome.ok:
            show_result(state, name, outcome.value)
            ui.notify(describe_result(state, name, outcome.value), type='positive', position='bottom')
        else:
            kind = 'warning' if outcome.error_kind in SOFT_ERRORS else 'negative'
            ui.notify(outcome.message, type=kind, position='bottom')
        redraw()

    def arrange(strategy) -> None:
        strategy(state)
        refocus()

    def arrange_tree() -> None:
        if not state.nodes:
            return
        start = state.find_node_by_id(start_select.value) or state.nodes[0]
        result = bfs(build_adjacency(state), start.id)
        tree_arrange(state, result.predecessors, start)
        refocus()

    def arrange_toposort() -> None:
        result = toposort_arrange(state)
        if result.has_cycle:
            ui.notify('The graph has a cycle, toposort arrange skipped', type='warning')
        refocus()

    def load_sample() -> None:
        load_record(state, constants.TEMPLATE_GRAPH)
        refocus()

    def load_task_dag() -> None:
        load_edge_list(state, constants.TEMPLATE_GRAPH_TOPO, arrange=False)
        toposort_arrange(state, record=False)
        refocus()

    def share() -> None:
        try:
            url = to_share_url(state, str(ui.context.client.request.url))
        except GraphFormatError as e:
            ui.notify(str(e), type='negative')
            return
        show_text_dialog('Share URL', url)

    def refresh_start_options(_state=None) -> None:
        start_select.options = {n.id: str(n.label) for n in state.nodes}
        if start_select.value not in start_select.options:
            start_select.value = state.nodes[0].id if state.nodes else None
        start_select.update()

    # Toolbar
    with ui.row().classes('fixed top-2 left-2 items-center gap-1 bg-white/90 rounded shadow p-1 z-10'):
        for key, name in constants.TOOLS_KEYS.items():
            ui.button(icon=TOOL_ICONS[name], on_click=lambda n=name: handlers['activate_tool'](n)) \
                .props('flat dense').tooltip(f'{name} ({key[-1]})')
        ui.separator().props('vertical')
        ui.button(icon='undo', on_click=lambda: (undo(state), redraw())).props('flat dense').tooltip('Undo (Ctrl+Z)')
        ui.button(icon='redo', on_click=lambda: (redo(state), redraw())).props('flat dense').tooltip('Redo (Ctrl+Y)')
        ui.button(icon='center_focus_strong', on_click=refocus).props('flat dense').tooltip('Focus on all nodes')
        ui.button(icon='format_clear', on_click=lambda: (state.reset_styles(), redraw())) \
            .props('flat dense').tooltip('Clear highlights')
        ui.separator().props('vertical')

        with ui.button(icon='account_tree').props('flat dense').tooltip('Arrange'):
            with ui.menu():
                ui.menu_item('Circular', on_click=lambda: arrange(circular_arrange))
                ui.menu_item('Grid', on_click=lambda: arrange(grid_arrange))
                ui.menu_item('Sequence', on_click=lambda: arrange(sequence_arrange))
                ui.menu_item('Toposort', on_click=arrange_toposort)
                ui.menu_item('Tree (BFS)', on_click=arrange_tree)
                ui.menu_item('Organic', on_click=lambda: arrange(organic_arrange))

        start_select = ui.select({}, label='Start').props('dense outlined').classes('w-24')
        with ui.button(icon='play_arrow').props('flat dense').tooltip('Run algorithm'):
            with ui.menu():
                for name in ALGORITHMS:
                    ui.menu_item(name, on_click=lambda n=name: run(n))
        ui.separator().props('vertical')

        with ui.button(icon='library_books').props('flat dense').tooltip('Examples'):
            with ui.menu():
                ui.menu_item('Sample graph', on_click=load_sample)
                ui.menu_item('Task DAG', on_click=load_task_dag)
        ui.button(icon='notes', on_click=lambda: show_edge_list_dialog(state, refocus)) \
            .props('flat dense').tooltip('Edit as edge list')
        ui.button(icon='share', on_click=share).props('flat dense').tooltip('Share URL')
        ui.button(icon='code', on_click=lambda: show_text_dialog('Graphviz DOT', to_dot_source(state))) \
            .props('flat dense').tooltip('Export DOT')
        ui.switch('Weights', value=state.show_weights,
                  on_change=lambda e: (setattr(state, 'show_weights', e.value), redraw())).props('dense')
        ui.switch('Snap', value=state.snap_to_grid,
                  on_change=lambda e: (setattr(state, 'snap_to_grid', e.value), redraw())).props('dense')

    state.add_graph_listener(refresh_start_options)
    refresh_start_options()
    redraw()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='GraphBoard',
        port=8080,
        reload=not getattr(sys, 'frozen', False),
    )
