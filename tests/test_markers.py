from __future__ import annotations

import textwrap

from clidoc.markers import MarkerManager, parse_options


def _doc(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


def test_parse_options_coerces_scalars() -> None:
    options = parse_options(' style=flat-square collapse=true collapseVisible=2 label="More stuff"')

    assert options == {
        "style": "flat-square",
        "collapse": True,
        "collapseVisible": 2,
        "label": "More stuff",
    }


def test_parse_options_bare_key_is_true() -> None:
    assert parse_options(" evaluateUsed includeDev=false") == {
        "evaluateUsed": True,
        "includeDev": False,
    }


def test_parse_options_tolerates_unbalanced_quotes() -> None:
    assert parse_options(' style="flat') == {"style": '"flat'}


def test_parse_finds_directives_with_options_and_body() -> None:
    markdown = _doc(
        """
        # Title

        <!-- clidoc:begin:BADGES collapse=true -->
        old badges
        <!-- clidoc:end:BADGES -->

        <!-- clidoc:begin:ACKNOWLEDGMENTS -->
        <!-- clidoc:end:ACKNOWLEDGMENTS -->
        """
    )

    directives = MarkerManager().parse(markdown)

    assert [directive.name for directive in directives] == ["BADGES", "ACKNOWLEDGMENTS"]
    assert directives[0].options == {"collapse": True}
    assert directives[0].body == "old badges"
    assert directives[1].body == ""


def test_parse_skips_directives_inside_code_fences() -> None:
    markdown = _doc(
        """
        ```markdown
        <!-- clidoc:begin:BADGES -->
        <!-- clidoc:end:BADGES -->
        ```
        """
    )

    assert MarkerManager().parse(markdown) == []


def test_parse_skips_unterminated_blocks() -> None:
    markdown = "<!-- clidoc:begin:BADGES -->\nno end marker\n"

    assert MarkerManager().parse(markdown) == []


def test_replace_blocks_rewrites_body_and_keeps_markers() -> None:
    markdown = _doc(
        """
        intro
        <!-- clidoc:begin:BADGES style=flat -->
        stale
        <!-- clidoc:end:BADGES -->
        outro
        """
    )

    updated = MarkerManager().replace_blocks(markdown, lambda directive: "fresh")

    assert updated == _doc(
        """
        intro
        <!-- clidoc:begin:BADGES style=flat -->
        fresh
        <!-- clidoc:end:BADGES -->
        outro
        """
    )


def test_replace_blocks_none_keeps_block_untouched() -> None:
    markdown = "<!-- clidoc:begin:UNKNOWN -->\n  keep me  \n<!-- clidoc:end:UNKNOWN -->\n"

    assert MarkerManager().replace_blocks(markdown, lambda directive: None) == markdown


def test_replace_blocks_empty_content_collapses_body() -> None:
    markdown = "<!-- clidoc:begin:BADGES -->\nold\n<!-- clidoc:end:BADGES -->\n"

    updated = MarkerManager().replace_blocks(markdown, lambda directive: "")

    assert updated == "<!-- clidoc:begin:BADGES -->\n<!-- clidoc:end:BADGES -->\n"



def test_parse_options_keeps_version_like_values_as_text() -> None:
    options = parse_options(
        " ciBranch=1.10 ciWorkflow=2024-01-01 collapseLabel=Yes style=no collapseVisible=007"
    )

    assert options == {
        "ciBranch": "1.10",
        "ciWorkflow": "2024-01-01",
        "collapseLabel": "Yes",
        "style": "no",
        "collapseVisible": "007",
    }


def test_parse_options_types_booleans_and_integers_only() -> None:
    assert parse_options(" collapse=TRUE includeDev=false collapseVisible=-1 ciBranch=no") == {
        "collapse": True,
        "includeDev": False,
        "collapseVisible": -1,
        "ciBranch": "no",
    }
