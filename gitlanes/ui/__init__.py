"""Qt display surface for laid-out git graphs."""

from gitlanes.ui.git_graph_view import GitGraphScene, GitGraphView, SplineEdge

__all__ = ["GitGraphScene", "GitGraphView", "SplineEdge"]
