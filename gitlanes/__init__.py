"""Horizontal commit-graph layout for git histories"""

from gitlanes.graph import Commit, GraphLayout, RefKind, RefLabel, render_graph

__all__ = ["Commit", "GraphLayout", "RefKind", "RefLabel", "render_graph"]
