"""Tests for per-page navigation views and breadcrumbs."""

from __future__ import annotations

import typing as typ

import pytest

from agentstatic.navigation import (
    BreadcrumbItem,
    NavigationTree,
    active_trail,
    breadcrumbs,
    build_navigation_tree,
    navigation_view,
    visible_children,
)


@pytest.fixture
def tree(content_records: list[dict[str, typ.Any]]) -> NavigationTree:
    """Return the shared tree built from the sample site."""
    return build_navigation_tree(content_records)


def test_breadcrumbs_run_from_root_to_current(tree: NavigationTree) -> None:
    assert breadcrumbs(tree, "/guide/install/") == (
        BreadcrumbItem(title="Guide", url="/guide"),
        BreadcrumbItem(title="Install", url="/guide/install", current=True),
    )


def test_breadcrumbs_for_unknown_path_are_empty(tree: NavigationTree) -> None:
    assert breadcrumbs(tree, "/nowhere") == ()
    assert active_trail(tree, "/nowhere") == ()


def test_breadcrumbs_include_hidden_pages(tree: NavigationTree) -> None:
    crumbs = breadcrumbs(tree, "/blog/draft")

    assert [crumb.to_dict() for crumb in crumbs] == [
        {"title": "Blog", "url": "/blog", "current": False},
        {"title": "Draft", "url": "/blog/draft", "current": True},
    ]


def test_visible_children_skip_hidden(tree: NavigationTree) -> None:
    assert visible_children(tree.find_by_path("/blog")) == ()


def test_navigation_view_marks_active_and_trail(tree: NavigationTree) -> None:
    views = navigation_view(tree, "/guide/install")
    by_url = {view.node.url_path: view for view in views}

    guide = by_url["/guide"]
    assert (guide.active, guide.in_trail) == (False, True)
    install, configure = guide.children
    assert (install.active, install.in_trail) == (True, True)
    assert (configure.active, configure.in_trail) == (False, False)
    assert not by_url["/"].in_trail


def test_navigation_view_hides_hidden_nodes_unless_asked(tree: NavigationTree) -> None:
    blog = {view.node.url_path: view for view in navigation_view(tree, "/")}["/blog"]
    assert blog.children == ()

    blog = {
        view.node.url_path: view
        for view in navigation_view(tree, "/", include_hidden=True)
    }["/blog"]
    assert [child.node.title for child in blog.children] == ["Draft"]


def test_views_do_not_mutate_the_shared_tree(tree: NavigationTree) -> None:
    before = tree.to_dicts()

    first = navigation_view(tree, "/guide/install")
    second = navigation_view(tree, "/blog")

    assert tree.to_dicts() == before
    assert first != second
    assert navigation_view(tree, "/guide/install") == first


def test_view_dicts_match_navigation_props(tree: NavigationTree) -> None:
    views = navigation_view(tree, "/guide/configure")

    assert views[1].to_dict() == {
        "title": "Guide",
        "url": "/guide",
        "active": False,
        "in_trail": True,
        "children": [
            {
                "title": "Install",
                "url": "/guide/install",
                "active": False,
                "in_trail": False,
                "children": [],
            },
            {
                "title": "Configure",
                "url": "/guide/configure",
                "active": True,
                "in_trail": True,
                "children": [],
            },
        ],
    }
