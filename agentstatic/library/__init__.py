"""Built-in partials rendered from Jinja templates.

These definitions cover the pieces most sites need on day one (navigation,
breadcrumbs, a hero block, and cards) and double as reference partials: each
declares a described schema, class-scoped styles, usage examples, and, where
it composes other partials, its dependencies.

Templates live in ``agentstatic/library/templates`` and receive the
validated props as ``props`` and the helper bundle as ``h``. Autoescape is
on, so plain strings from content are always escaped; nested partials come
back from ``h.render_partial`` as :class:`markupsafe.Markup`.

Examples
--------
>>> from agentstatic.library import default_registry
>>> registry = default_registry()
>>> registry.by_category("navigation")
('breadcrumbs', 'nav-link', 'navigation')
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template
from pydantic import Field

from agentstatic._constants import DEFAULT_SCOPE_PREFIX
from agentstatic.partials import (
    PartialDefinition,
    PartialMetadata,
    PartialProps,
    PartialRegistry,
    TemplateHelpers,
    UsageExample,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateRender:
    """Render function backed by a Jinja template."""

    def __init__(self, template: Template) -> None:
        self.template = template

    def __call__(self, props: PartialProps, helpers: TemplateHelpers) -> str:
        return self.template.render(props=props, h=helpers)


class CallToAction(PartialProps):
    text: str = Field(description="Button label")
    url: str = Field(description="Button target URL")
    variant: typ.Literal["primary", "secondary"] = Field(
        default="primary", description="Button style variant"
    )


class HeroProps(PartialProps):
    title: str = Field(min_length=1, description="Main headline text")
    subtitle: str | None = Field(default=None, description="Supporting subtitle")
    cta: CallToAction | None = Field(default=None, description="Optional call to action")


class CardProps(PartialProps):
    title: str = Field(min_length=1, description="Card title")
    content: str = Field(description="Card description, truncated to 150 characters")
    image: str | None = Field(default=None, description="Optional image URL")
    link: str | None = Field(default=None, description="Optional link URL")
    variant: typ.Literal["default", "featured", "minimal"] = Field(
        default="default", description="Card style variant"
    )


class CardGridProps(PartialProps):
    heading: str | None = Field(default=None, description="Optional grid heading")
    cards: list[CardProps] = Field(min_length=1, description="Cards to lay out")
    columns: int = Field(default=3, ge=1, le=4, description="Columns on wide screens")


class NavLinkProps(PartialProps):
    title: str = Field(description="Link text")
    url: str = Field(description="Link target")
    active: bool = Field(default=False, description="Whether the link is the current page")
    in_trail: bool = Field(
        default=False, description="Whether the link is an ancestor of the current page"
    )


class NavItem(PartialProps):
    title: str = Field(description="Link text")
    url: str = Field(description="Link target")
    active: bool = Field(default=False, description="Whether the item is the current page")
    in_trail: bool = Field(
        default=False, description="Whether the item is on the active trail"
    )
    children: list[NavItem] = Field(default_factory=list, description="Nested items")


class NavigationProps(PartialProps):
    items: list[NavItem] = Field(
        description="Navigation items, from a navigation view or a manual override"
    )
    label: str = Field(default="Main navigation", description="Accessible label")


class Crumb(PartialProps):
    title: str = Field(description="Crumb text")
    url: str = Field(description="Crumb target")
    current: bool = Field(default=False, description="Whether this is the current page")


class BreadcrumbsProps(PartialProps):
    items: list[Crumb] = Field(description="Trail from the root to the current page")
    label: str = Field(default="Breadcrumb", description="Accessible label")
    separator: str = Field(default="/", description="Text shown between crumbs")


def _environment(templates_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def builtin_partials(*, templates_dir: Path | None = None) -> dict[str, PartialDefinition]:
    """Return the built-in partial definitions keyed by name.

    Parameters
    ----------
    templates_dir : Path, optional
        Directory containing the Jinja templates. Defaults to the templates
        shipped with the package.
    """
    env = _environment(templates_dir or TEMPLATES_DIR)

    def _render(name: str) -> TemplateRender:
        return TemplateRender(env.get_template(f"{name}.jinja"))

    return {
        "hero": PartialDefinition(
            schema=HeroProps,
            render=_render("hero"),
            styles="""
                .hero { padding: 4rem 2rem; text-align: center; }
                .hero__title { font-size: clamp(2rem, 5vw, 4rem); margin-bottom: 1rem; }
                .hero__subtitle { font-size: 1.25rem; color: var(--text-light, #666); }
                .hero__cta { display: inline-block; padding: 1rem 2rem; border-radius: 0.5rem; }
                .hero__cta--primary { background: var(--primary-color, #3b82f6); color: white; }
                .hero__cta--secondary { background: #e5e7eb; color: #374151; }
            """,
            metadata=PartialMetadata(
                description="Hero section with optional subtitle and call to action",
                category="layout",
                keywords=["hero", "banner", "cta", "landing"],
                usage_examples=[
                    UsageExample("Simple hero with title only", {"title": "Welcome"}),
                    UsageExample(
                        "Hero with subtitle and call to action",
                        {
                            "title": "Build Amazing Sites",
                            "subtitle": "With schema-checked partials",
                            "cta": {
                                "text": "Get Started",
                                "url": "/start",
                                "variant": "primary",
                            },
                        },
                    ),
                ],
            ),
        ),
        "card": PartialDefinition(
            schema=CardProps,
            render=_render("card"),
            styles="""
                .card { border: 1px solid #e5e7eb; border-radius: 0.5rem; overflow: hidden; }
                .card:hover { transform: translateY(-2px); }
                .card--featured { border-color: #3b82f6; }
                .card--minimal { border: none; }
                .card__image { width: 100%; height: 200px; object-fit: cover; }
                .card__content { padding: 1.5rem; }
                .card__title { font-size: 1.25rem; margin-bottom: 0.5rem; }
                .card__link { color: #3b82f6; text-decoration: none; }
            """,
            metadata=PartialMetadata(
                description="Flexible card for previews of content",
                category="content",
                keywords=["card", "content", "article", "preview"],
                usage_examples=[
                    UsageExample(
                        "Basic card with title and content",
                        {"title": "Sample Article", "content": "A short description."},
                    ),
                    UsageExample(
                        "Featured card with image and link",
                        {
                            "title": "Featured Post",
                            "content": "An important featured post with an image.",
                            "image": "/assets/featured.jpg",
                            "link": "/posts/featured",
                            "variant": "featured",
                        },
                    ),
                ],
            ),
        ),
        "card-grid": PartialDefinition(
            schema=CardGridProps,
            render=_render("card-grid"),
            styles="""
                .card-grid { display: grid; gap: 1.5rem; }
                .card-grid__heading { margin-bottom: 1rem; }
                @media (min-width: 768px) {
                    .card-grid--2 { grid-template-columns: repeat(2, 1fr); }
                    .card-grid--3 { grid-template-columns: repeat(3, 1fr); }
                    .card-grid--4 { grid-template-columns: repeat(4, 1fr); }
                }
            """,
            dependencies=["card"],
            metadata=PartialMetadata(
                description="Responsive grid of cards",
                category="layout",
                keywords=["grid", "cards", "listing"],
                usage_examples=[
                    UsageExample(
                        "Two cards in a two-column grid",
                        {
                            "heading": "Latest posts",
                            "columns": 2,
                            "cards": [
                                {"title": "First", "content": "First post."},
                                {"title": "Second", "content": "Second post."},
                            ],
                        },
                    )
                ],
            ),
        ),
        "nav-link": PartialDefinition(
            schema=NavLinkProps,
            render=_render("nav-link"),
            styles="""
                .nav-link { text-decoration: none; color: inherit; }
                .nav-link--active { font-weight: 700; }
                .nav-link--trail { text-decoration: underline; }
            """,
            metadata=PartialMetadata(
                description="Single navigation link with active and trail states",
                category="navigation",
                keywords=["link", "menu", "navigation"],
                usage_examples=[
                    UsageExample("Active link", {"title": "Docs", "url": "/docs", "active": True})
                ],
            ),
        ),
        "navigation": PartialDefinition(
            schema=NavigationProps,
            render=_render("navigation"),
            styles="""
                .nav__list { list-style: none; margin: 0; padding: 0; }
                .nav__list .nav__list { padding-left: 1rem; }
                .nav__item { margin: 0.25rem 0; }
                .nav__item--trail .nav-link { font-weight: 600; }
                .nav--enhanced .nav__list .nav__list { border-left: 1px solid #e5e7eb; }
            """,
            script=(
                "document.querySelectorAll('[data-nav]').forEach((nav) => {"
                " nav.classList.add('nav--enhanced'); });"
            ),
            dependencies=["nav-link"],
            metadata=PartialMetadata(
                description="Hierarchical site navigation built from a navigation view",
                category="navigation",
                keywords=["nav", "menu", "sidebar", "tree"],
                usage_examples=[
                    UsageExample(
                        "Two sections with the current page nested",
                        {
                            "items": [
                                {
                                    "title": "Guide",
                                    "url": "/guide",
                                    "in_trail": True,
                                    "children": [
                                        {
                                            "title": "Install",
                                            "url": "/guide/install",
                                            "active": True,
                                            "in_trail": True,
                                        }
                                    ],
                                },
                                {"title": "Blog", "url": "/blog"},
                            ]
                        },
                    )
                ],
            ),
        ),
        "breadcrumbs": PartialDefinition(
            schema=BreadcrumbsProps,
            render=_render("breadcrumbs"),
            styles="""
                .breadcrumbs__list { display: flex; gap: 0.5rem; list-style: none; padding: 0; }
                .breadcrumbs__separator { color: #9ca3af; }
                .breadcrumbs__current { font-weight: 600; }
            """,
            metadata=PartialMetadata(
                description="Breadcrumb trail from the root to the current page",
                category="navigation",
                keywords=["breadcrumbs", "trail", "navigation"],
                usage_examples=[
                    UsageExample(
                        "Trail ending at the current page",
                        {
                            "items": [
                                {"title": "Guide", "url": "/guide"},
                                {"title": "Install", "url": "/guide/install", "current": True},
                            ]
                        },
                    )
                ],
            ),
        ),
    }


def default_registry(
    *, scope_prefix: str = DEFAULT_SCOPE_PREFIX, templates_dir: Path | None = None
) -> PartialRegistry:
    """Return a validated registry holding every built-in partial."""
    registry = PartialRegistry(scope_prefix=scope_prefix)
    for name, definition in builtin_partials(templates_dir=templates_dir).items():
        registry.register(name, definition)
    registry.validate()
    return registry


__all__ = [
    "BreadcrumbsProps",
    "CardGridProps",
    "CardProps",
    "HeroProps",
    "NavLinkProps",
    "NavigationProps",
    "TemplateRender",
    "builtin_partials",
    "default_registry",
]
