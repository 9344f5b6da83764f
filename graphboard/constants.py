"""
Shared constants for the graph editor.

Geometry values are in canvas units (pixels at zoom 1). The NiceGUI shell
and the SVG surface read the same values, keep them in sync.
"""

# Tools
DEFAULT_TOOL = "select"
TOOLS_KEYS = {
    "Digit1": "select",
    "Digit2": "add-nodes",
    "Digit3": "edges",
    "Digit4": "delete",
    "Digit5": "drag",
    "Digit6": "edit",
}

# Keys
PAN_KEY = "Space"
RESET_KEY = "Escape"
DELETE_KEY = "Delete"
NODE_CREATION_KEY = "KeyN"
ARROW_NUDGE = 1
SHORTCUT_ARROWS_PAN_SPEED = 50

# Defaults
DEFAULT_SHOW_WEIGHTS = True
DEFAULT_ENABLE_MEMENTO = True
DEFAULT_ENABLE_CACHE = True
DEFAULT_EDGE_WEIGHT = 1

# Nodes
NODE_RADIUS = 30
NODE_BACKGROUND_COLOR = "#ffffff"
NODE_LABEL_COLOR = "#000000"
NODE_LABEL_FONT_SIZE = 16
NODE_BORDER_COLOR = "#000000"
NODE_BORDER_WIDTH = 4
NODE_BUBBLE_RADIUS = 10
NODE_BUBBLE_COLOR = "#9d00d6"
NODE_BUBBLE_TEXT_COLOR = "#ffffff"
PREVIEW_NODE_OPACITY = 0.5

# Edges
EDGE_HOVER_THRESHOLD_FACTOR = 2
EDGE_THICKNESS_RATIO = 0.2
EDGE_COLOR = "#000000"
EDGE_WEIGHT_COLOR = "#ffffff"
EDGE_WEIGHT_BACKGROUND_COLOR = "#000000"
EDGE_ARROW_SIZE_FACTOR = 3
EDGE_WEIGHT_CONTAINER_FACTOR = 2
PREVIEW_EDGE_THICKNESS = 6

# Grid
GRID_ENABLED = True
GRID_SIZE = 50

# Selection / hover borders
HOVER_BORDER_COLOR = "#0D99FF88"
SELECTED_BORDER_COLOR = "#0D99FF"
DELETE_BORDER_COLOR = "#FF0000aa"

# Canvas
CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 800
BACKGROUND_COLOR = "#eeeeee"

# Layout
LAYOUT_MARGIN = NODE_RADIUS * 5
TREE_ROW_GAP = NODE_RADIUS * 4
TREE_COLUMN_GAP = NODE_RADIUS * 5
ORGANIC_MIN_DISTANCE = NODE_RADIUS * 4
ORGANIC_ANGLE_STEP = 30      # degrees between spiral candidates
ORGANIC_RING_STEP = NODE_RADIUS * 2
ORGANIC_MAX_RINGS = 100

# Colour palette used by colouring / component highlighting
COLORS_PALETTE = [
    "#ff0000", "#00ff00", "#0000ff", "#ffff00", "#ff00ff", "#00ffff",
    "#ff8000", "#ff0080", "#80ff00", "#00ff80", "#0080ff", "#8000ff",
    "#ff8080", "#80ff80", "#8080ff", "#ff80ff", "#80ffff",
]

# Demo graph loaded on a fresh session with no cache
TEMPLATE_GRAPH = {
    "nodes": [
        {"x": 711, "y": 372, "r": 30, "label": "A"},
        {"x": 875, "y": 281, "r": 30, "label": "B"},
        {"x": 894, "y": 467, "r": 30, "label": "C"},
        {"x": 1036, "y": 304, "r": 30, "label": "D"},
        {"x": 1071, "y": 495, "r": 30, "label": "E"},
    ],
    "edges": [
        {"src": "A", "dst": "B", "weight": 1},
        {"src": "B", "dst": "C", "weight": 1},
        {"src": "C", "dst": "D", "weight": 1},
        {"src": "A", "dst": "C", "weight": 1},
        {"src": "D", "dst": "E", "weight": 1},
    ],
}

TEMPLATE_GRAPH_TOPO = """
A->B
A->C
B->D
C->D
D->E
E
"""
