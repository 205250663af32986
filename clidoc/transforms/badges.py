"""Badge generation for README headers."""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

from ..context import WorkingContext
from ..models import BadgeEntry, ProjectDescriptor
from ..project import load_project_descriptor, parse_repo_coordinates
from ..rendering import render_template
from .options import RenderOptions, TransformSettings, merge_options

TRANSFORM_NAME = "BADGES"

# Keys shown first when badges are collapsed; absent keys are skipped.
PREFERRED_VISIBLE: Tuple[str, ...] = ("npmVersion", "actions", "license", "maintained")

_BADGE_PATTERN = re.compile(
    r"\[!\[(?P<alt>[^\]]*)\]\((?P<image>[^)\s]+)\)\]\((?P<link>[^)\s]+)\)"
    r"|!\[(?P<bare_alt>[^\]]*)\]\((?P<bare_image>[^)\s]+)\)"
)


def resolve_render_options(
    descriptor: ProjectDescriptor | None,
    options: Mapping[str, Any] | None = None,
    settings: TransformSettings | None = None,
) -> RenderOptions:
    """Merge built-in defaults, descriptor overrides, transform defaults and options."""
    defaults = RenderOptions().as_dict()
    if descriptor is not None:
        if descriptor.ci_workflow:
            defaults["ci_workflow"] = descriptor.ci_workflow
        if descriptor.ci_branch:
            defaults["ci_branch"] = descriptor.ci_branch
    return RenderOptions.from_mapping(merge_options(TRANSFORM_NAME, defaults, settings, options))


def build_badges(descriptor: ProjectDescriptor, options: RenderOptions) -> List[BadgeEntry]:
    """Return badge entries in their fixed display order."""
    entries: List[BadgeEntry] = []

    def add(key: str, alt: str, image: str, link: str | None = None) -> None:
        markdown = f"![{alt}]({_with_style(image, options.style)})"
        if link:
            markdown = f"[{markdown}]({link})"
        entries.append(BadgeEntry(key=key, markdown=markdown))

    if descriptor.name:
        name = _encode(descriptor.name)
        add(
            "npmVersion",
            "npm version",
            f"https://img.shields.io/npm/v/{name}.svg",
            f"https://www.npmjs.com/package/{name}",
        )
    if descriptor.version:
        version = _encode(_shields_escape(descriptor.version))
        add("version", "version", f"https://img.shields.io/badge/version-{version}-blue.svg")
    if descriptor.license:
        license_id = _encode(_shields_escape(descriptor.license))
        add("license", "license", f"https://img.shields.io/badge/license-{license_id}-blue.svg")

    coordinates = parse_repo_coordinates(descriptor.repository)
    if coordinates is None:
        return entries

    slug = coordinates.slug
    repo_url = f"https://github.com/{slug}"
    shields = "https://img.shields.io/github"
    workflow = _encode(options.ci_workflow)
    branch = _encode(options.ci_branch)

    add(
        "actions",
        "actions status",
        f"{shields}/actions/workflow/status/{slug}/{workflow}?branch={branch}",
        f"{repo_url}/actions/workflows/{workflow}",
    )
    add(
        "codecov",
        "codecov",
        f"https://img.shields.io/codecov/c/github/{slug}?branch={branch}",
        f"https://codecov.io/gh/{slug}",
    )
    add("release", "release", f"{shields}/v/release/{slug}", f"{repo_url}/releases")
    add(
        "maintained",
        "maintained",
        "https://img.shields.io/badge/maintained-yes-brightgreen.svg",
        f"{repo_url}/graphs/commit-activity",
    )
    add("stars", "stars", f"{shields}/stars/{slug}", f"{repo_url}/stargazers")
    add("forks", "forks", f"{shields}/forks/{slug}", f"{repo_url}/network/members")
    add("watchers", "watchers", f"{shields}/watchers/{slug}", f"{repo_url}/watchers")
    add(
        "lastCommit",
        "last commit",
        f"{shields}/last-commit/{slug}?branch={branch}",
        f"{repo_url}/commits/{branch}",
    )
    add(
        "contributors",
        "contributors",
        f"{shields}/contributors/{slug}",
        f"{repo_url}/graphs/contributors",
    )
    add("issues", "issues", f"{shields}/issues/{slug}", f"{repo_url}/issues")
    add("pulls", "pull requests", f"{shields}/issues-pr/{slug}", f"{repo_url}/pulls")
    add("repoSize", "repo size", f"{shields}/repo-size/{slug}")
    add("topLanguage", "top language", f"{shields}/languages/top/{slug}")
    add("languages", "languages", f"{shields}/languages/count/{slug}")
    return entries


def partition_badges(
    entries: Sequence[BadgeEntry], limit: int
) -> Tuple[List[BadgeEntry], List[BadgeEntry]]:
    """Split entries into visible and hidden groups.

    Visible entries are the ``limit`` best ranked by ``PREFERRED_VISIBLE``,
    ties broken by insertion order. Hidden entries keep insertion order.
    """
    ranked = sorted(enumerate(entries), key=_visible_rank)[: max(limit, 0)]
    chosen = {index for index, _ in ranked}
    visible = [entry for _, entry in ranked]
    hidden = [entry for index, entry in enumerate(entries) if index not in chosen]
    return visible, hidden


def _visible_rank(item: Tuple[int, BadgeEntry]) -> Tuple[int, int]:
    index, entry = item
    if entry.key in PREFERRED_VISIBLE:
        return PREFERRED_VISIBLE.index(entry.key), index
    return len(PREFERRED_VISIBLE), index


def render_badges(
    descriptor: ProjectDescriptor | None,
    options: Mapping[str, Any] | RenderOptions | None = None,
    *,
    settings: TransformSettings | None = None,
) -> str:
    """Render the badge block for ``descriptor`` as markdown."""
    if descriptor is None or not (descriptor.name or descriptor.repository):
        return ""
    if not isinstance(options, RenderOptions):
        options = resolve_render_options(descriptor, options, settings)

    entries = build_badges(descriptor, options)
    if not options.collapse or len(entries) <= options.collapse_visible:
        return " ".join(entry.markdown for entry in entries)

    visible, hidden = partition_badges(entries, options.collapse_visible)
    return render_template(
        "collapse.md.j2",
        visible=" ".join(entry.markdown for entry in visible),
        hidden=" ".join(entry.markdown for entry in hidden),
        label=options.collapse_label,
    )


def badges_transform(
    context: WorkingContext,
    options: Mapping[str, Any] | None = None,
    settings: TransformSettings | None = None,
) -> str:
    """``BADGES`` entry point: read ``package.json`` from the working directory."""
    descriptor = load_project_descriptor(context.cwd)
    return render_badges(descriptor, options, settings=settings)


def parse_badge_markdown(markdown: str) -> List[Tuple[str, str, Optional[str]]]:
    """Return ``(alt, image, link)`` triples for each badge in ``markdown``."""
    triples: List[Tuple[str, str, Optional[str]]] = []
    for match in _BADGE_PATTERN.finditer(markdown):
        if match.group("image") is not None:
            triples.append((match.group("alt"), match.group("image"), match.group("link")))
        else:
            triples.append((match.group("bare_alt"), match.group("bare_image"), None))
    return triples


def _with_style(url: str, style: str | None) -> str:
    if not style:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}style={_encode(style)}"


def _shields_escape(value: str) -> str:
    # Static badges use "-" as a field separator.
    return value.replace("-", "--").replace("_", "__")


def _encode(value: str) -> str:
    return quote(value, safe="")


__all__ = [
    "PREFERRED_VISIBLE",
    "TRANSFORM_NAME",
    "badges_transform",
    "build_badges",
    "parse_badge_markdown",
    "partition_badges",
    "render_badges",
    "resolve_render_options",
]
