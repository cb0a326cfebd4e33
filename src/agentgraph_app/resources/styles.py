"""
Styles and themes for the agent graph app.

Light theme with blue accents; the graph tooltip is a rich-text QLabel
styled by TOOLTIP_CSS.
"""

# Light theme colors
COLORS = {
    "bg_primary": "#fafafa",
    "bg_secondary": "#f5f7fa",
    "bg_hover": "#e3f2fd",
    "text_primary": "#37474f",
    "text_secondary": "#78909c",
    "accent": "#1565c0",
    "accent_hover": "#1976d2",
    "border": "#cfd8dc",
    "error": "#c62828",
}

LIGHT_STYLESHEET = """
QMainWindow, QWidget {
    background-color: #fafafa;
    color: #37474f;
    font-family: "Segoe UI", sans-serif;
}

QLabel#titleLabel {
    font-size: 16px;
    font-weight: bold;
    color: #1a237e;
}
QLabel#subtitleLabel, QLabel#totalLabel {
    color: #78909c;
}
QLabel#pageLabel {
    font-weight: bold;
    min-width: 70px;
    qproperty-alignment: AlignCenter;
}

QPushButton {
    background-color: #f5f7fa;
    color: #37474f;
    padding: 6px 16px;
    border-radius: 4px;
    border: 1px solid #cfd8dc;
    min-width: 80px;
}
QPushButton:hover {
    background-color: #e3f2fd;
    border-color: #90caf9;
}
QPushButton:pressed {
    background-color: #bbdefb;
}
QPushButton:disabled {
    background-color: #eceff1;
    color: #b0bec5;
}

QGraphicsView {
    border: 1px solid #cfd8dc;
    border-radius: 4px;
}

QLabel#graphTooltip {
    background-color: #ffffff;
    border: 1px solid #e3f2fd;
    border-radius: 8px;
    padding: 10px 12px;
}

QStatusBar {
    background-color: #f5f7fa;
    color: #546e7a;
    border-top: 1px solid #cfd8dc;
}
"""

# Rich-text CSS for TooltipContent.to_html()
TOOLTIP_CSS = """
h3 { color: #1a237e; margin: 0px; }
.tooltip-header { margin-bottom: 6px; }
.tooltip-meta { color: #546e7a; font-size: small; }
.tooltip-meta span { margin-right: 8px; }
.tooltip-description { color: #37474f; margin-top: 6px; }
.tooltip-history { margin-top: 6px; color: #455a64; }
.tooltip-history-item { margin-top: 4px; }
.tooltip-history-author { color: #1565c0; font-weight: bold; }
.tooltip-history-content { color: #37474f; }
.tooltip-history-model { color: #78909c; font-size: small; }
"""
