"""Content-driven navigation: records, the immutable tree, and per-page views."""

from .builder import build_navigation_tree
from .models import ContentRecord, NavigationNode, NavigationTree, normalize_node_id
from .views import (
    BreadcrumbItem,
    NavigationView,
    active_trail,
    breadcrumbs,
    navigation_view,
    visible_children,
)

__all__ = [
    "BreadcrumbItem",
    "ContentRecord",
    "NavigationNode",
    "NavigationTree",
    "NavigationView",
    "active_trail",
    "breadcrumbs",
    "build_navigation_tree",
    "navigation_view",
    "normalize_node_id",
    "visible_children",
]
