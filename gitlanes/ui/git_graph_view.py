"""Git graph view widget - draws a GraphLayout with Qt graphics items."""

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen, QWheelEvent
from PySide6.QtWidgets import (
    QGraphicsEllipseItem,
    QGraphicsItem,
    QGraphicsPathItem,
    QGraphicsRectItem,
    QGraphicsScene,
    QGraphicsSimpleTextItem,
    QGraphicsView,
    QWidget,
)

from gitlanes.graph.edges import EdgePath
from gitlanes.graph.labels import Anchor
from gitlanes.graph.layout import (
    BadgePrimitive,
    CirclePrimitive,
    GraphLayout,
    PathPrimitive,
    TextPrimitive,
)

BACKGROUND = QColor("#1E1E1E")
TEXT_COLOR = QColor("#FFFFFF")


class SplineEdge(QGraphicsPathItem):
    """
    A cubic bezier connecting a child commit to its parent.

    The geometry is computed by the layout; this item only draws it.
    Newer commits are on the LEFT, so start.x < end.x.
    """

    def __init__(
        self,
        path: EdgePath,
        color: QColor,
        width: float = 2.0,
        opacity: float = 0.8,
        parent: QGraphicsItem | None = None,
    ) -> None:
        super().__init__(parent)
        self.edge_path = path
        self.color = color
        self._build_path()
        self._setup_style(width, opacity)

    def _build_path(self) -> None:
        path = QPainterPath()
        path.moveTo(QPointF(*self.edge_path.start))
        path.cubicTo(
            QPointF(*self.edge_path.c1),
            QPointF(*self.edge_path.c2),
            QPointF(*self.edge_path.end),
        )
        self.setPath(path)

    def _setup_style(self, width: float, opacity: float) -> None:
        """Setup pen style."""
        pen = QPen(self.color, width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        self.setPen(pen)
        self.setBrush(Qt.BrushStyle.NoBrush)
        self.setOpacity(opacity)

        # Draw behind commit markers
        self.setZValue(-1)


class GitGraphScene(QGraphicsScene):
    """Scene holding the items for one GraphLayout."""

    def __init__(self, layout: GraphLayout, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.graph_layout = layout
        self.oid_to_marker: dict[str, QGraphicsEllipseItem] = {}

        self.setBackgroundBrush(BACKGROUND)
        self._build_scene()

    def _build_scene(self) -> None:
        for primitive in self.graph_layout.primitives:
            if isinstance(primitive, PathPrimitive):
                self.addItem(
                    SplineEdge(
                        primitive.path,
                        QColor(primitive.color),
                        primitive.stroke_width,
                        primitive.opacity,
                    )
                )
            elif isinstance(primitive, CirclePrimitive):
                self._add_marker(primitive)
            elif isinstance(primitive, BadgePrimitive):
                self._add_badge(primitive)
            elif isinstance(primitive, TextPrimitive):
                self._add_text(primitive.x, primitive.y, primitive.text, primitive.anchor, primitive.color)

        min_x, min_y, width, height = self.graph_layout.view_box
        self.setSceneRect(QRectF(min_x, min_y, width, height))

    def _add_marker(self, primitive: CirclePrimitive) -> None:
        r = primitive.r
        marker = QGraphicsEllipseItem(primitive.cx - r, primitive.cy - r, 2 * r, 2 * r)
        marker.setBrush(QBrush(QColor(primitive.fill)))
        marker.setPen(QPen(QColor(primitive.stroke), primitive.stroke_width))
        marker.setToolTip(primitive.commit)
        self.addItem(marker)
        self.oid_to_marker[primitive.commit] = marker

    def _add_badge(self, primitive: BadgePrimitive) -> None:
        left, top, width, height = primitive.rect
        rect = QGraphicsRectItem(left, top, width, height)
        rect.setBrush(QBrush(QColor(255, 255, 255, 51)))
        rect.setPen(QPen(QColor(255, 255, 255, 77)))
        self.addItem(rect)

        font = QFont()
        font.setPointSizeF(7.5)
        font.setBold(True)
        self._add_text(primitive.x, primitive.y + 2, primitive.text, Anchor.MIDDLE, None, font)

    def _add_text(
        self,
        x: float,
        y: float,
        text: str,
        anchor: Anchor,
        color: str | None,
        font: QFont | None = None,
    ) -> None:
        """Add text positioned like SVG: (x, y) is the anchor point on the baseline."""
        item = QGraphicsSimpleTextItem(text)
        if font is not None:
            item.setFont(font)
        item.setBrush(QBrush(QColor(color) if color else TEXT_COLOR))

        bounds = item.boundingRect()
        if anchor is Anchor.MIDDLE:
            left = x - bounds.width() / 2
        elif anchor is Anchor.END:
            left = x - bounds.width()
        else:
            left = x
        item.setPos(left, y - bounds.height())
        self.addItem(item)


class GitGraphView(QGraphicsView):
    """Pannable and zoomable view of a laid-out git graph."""

    MIN_ZOOM = 0.2
    MAX_ZOOM = 2.0
    ZOOM_FACTOR = 1.1

    def __init__(self, layout: GraphLayout | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        self._scene = GitGraphScene(layout or GraphLayout())
        self.setScene(self._scene)

        # Setup view
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)

        # Enable panning with left-click drag
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)

        # Current zoom level
        self._zoom = 1.0

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def graph_scene(self) -> GitGraphScene:
        return self._scene

    def set_layout(self, layout: GraphLayout) -> None:
        """Replace the drawn graph with a freshly computed layout."""
        self._scene = GitGraphScene(layout)
        self.setScene(self._scene)

    def _apply_zoom(self, new_zoom: float) -> None:
        """Apply zoom level, clamped to min/max."""
        new_zoom = max(self.MIN_ZOOM, min(self.MAX_ZOOM, new_zoom))
        if new_zoom != self._zoom:
            factor = new_zoom / self._zoom
            self._zoom = new_zoom
            self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)
            self.scale(factor, factor)

    def zoom_in(self) -> None:
        self._apply_zoom(self._zoom * self.ZOOM_FACTOR)

    def zoom_out(self) -> None:
        self._apply_zoom(self._zoom / self.ZOOM_FACTOR)

    def reset_zoom(self) -> None:
        self._apply_zoom(1.0)

    def wheelEvent(self, event: QWheelEvent) -> None:  # noqa: N802
        """Handle mouse wheel - Ctrl+wheel zooms, plain wheel scrolls."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            delta = event.angleDelta().y()
            if delta > 0:
                self.zoom_in()
            elif delta < 0:
                self.zoom_out()
            event.accept()
        else:
            super().wheelEvent(event)

    def fit_in_view(self) -> None:
        """Fit the entire graph in the view."""
        self.fitInView(self._scene.sceneRect(), Qt.AspectRatioMode.KeepAspectRatio)
        # Update zoom tracking
        self._zoom = self.transform().m11()
