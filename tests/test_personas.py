"""Tests for persona discovery and rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from subagents.personas.builtin import BUILTIN_PERSONAS, EXPLORE, GENERAL_PURPOSE
from subagents.personas.discovery import (
    AGENTS_SUBDIR,
    discover_personas,
    find_persona,
    parse_persona_file,
    render_agent_list,
)

# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@pytest.fixture()
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture()
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


def _write_persona(root: Path, filename: str, content: str) -> Path:
    directory = root / AGENTS_SUBDIR
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(content, encoding="utf-8")
    return path


def _names(personas: list) -> list[str]:
    return [p.name for p in personas]


# ------------------------------------------------------------------ #
# Built-ins
# ------------------------------------------------------------------ #


class TestBuiltins:
    def test_builtins_always_present(self, repo: Path, home: Path) -> None:
        personas = discover_personas(repo, home=home)
        assert _names(personas) == ["general-purpose", "explore"]
        assert all(p.builtin for p in personas)

    def test_explore_prefers_fast_tier(self) -> None:
        assert EXPLORE.model == "fast"
        assert GENERAL_PURPOSE.model is None

    def test_builtins_have_system_prompts(self) -> None:
        for persona in BUILTIN_PERSONAS:
            assert persona.system_prompt
            assert persona.when_to_use

    def test_builtins_cannot_be_shadowed(self, repo: Path, home: Path) -> None:
        _write_persona(
            repo, "explore.md", "---\nname: explore\ndescription: mine\n---\nOverride.\n"
        )
        personas = discover_personas(repo, home=home)
        assert _names(personas).count("explore") == 1
        assert find_persona(personas, "explore") is EXPLORE


# ------------------------------------------------------------------ #
# Discovery
# ------------------------------------------------------------------ #


class TestDiscovery:
    def test_repo_and_home_personas(self, repo: Path, home: Path) -> None:
        _write_persona(repo, "reviewer.md", "---\nname: reviewer\n---\nReview.\n")
        _write_persona(home, "writer.md", "---\nname: writer\n---\nWrite.\n")

        personas = discover_personas(repo, home=home)

        assert _names(personas) == ["general-purpose", "explore", "reviewer", "writer"]

    def test_repo_wins_over_home(self, repo: Path, home: Path) -> None:
        repo_file = _write_persona(
            repo, "reviewer.md", "---\nname: reviewer\ndescription: repo\n---\nRepo.\n"
        )
        _write_persona(
            home, "reviewer.md", "---\nname: reviewer\ndescription: home\n---\nHome.\n"
        )

        personas = discover_personas(repo, home=home)
        reviewer = find_persona(personas, "reviewer")

        assert _names(personas).count("reviewer") == 1
        assert reviewer is not None
        assert reviewer.when_to_use == "repo"
        assert reviewer.path == str(repo_file)

    def test_missing_directories_are_fine(self, tmp_path: Path) -> None:
        personas = discover_personas(tmp_path / "nope", home=tmp_path / "also-nope")
        assert _names(personas) == ["general-purpose", "explore"]

    def test_only_markdown_files(self, repo: Path, home: Path) -> None:
        _write_persona(repo, "notes.txt", "---\nname: notes\n---\nNo.\n")
        _write_persona(repo, "ok.md", "---\nname: ok\n---\nYes.\n")
        (repo / AGENTS_SUBDIR / "dir.md").mkdir()

        assert _names(discover_personas(repo, home=home))[2:] == ["ok"]

    def test_files_scanned_in_name_order(self, repo: Path, home: Path) -> None:
        _write_persona(repo, "b.md", "---\nname: bravo\n---\n")
        _write_persona(repo, "a.md", "---\nname: alpha\n---\n")
        assert _names(discover_personas(repo, home=home))[2:] == ["alpha", "bravo"]

    def test_find_persona_missing(self, repo: Path, home: Path) -> None:
        assert find_persona(discover_personas(repo, home=home), "ghost") is None


# ------------------------------------------------------------------ #
# File parsing
# ------------------------------------------------------------------ #


class TestParsePersonaFile:
    def test_full_file(self, repo: Path) -> None:
        path = _write_persona(
            repo,
            "reviewer.md",
            "---\n"
            "name: reviewer\n"
            "description: Use after writing code\n"
            "model: smart\n"
            "---\n"
            "\n"
            "You review code.\n"
            "Be thorough.\n",
        )
        persona = parse_persona_file(path)
        assert persona is not None
        assert persona.name == "reviewer"
        assert persona.when_to_use == "Use after writing code"
        assert persona.model == "smart"
        assert persona.system_prompt == "You review code.\nBe thorough."
        assert persona.builtin is False

    def test_missing_name_is_skipped(self, repo: Path) -> None:
        path = _write_persona(repo, "x.md", "---\ndescription: nameless\n---\nBody\n")
        assert parse_persona_file(path) is None

    def test_no_front_matter_is_skipped(self, repo: Path) -> None:
        path = _write_persona(repo, "x.md", "# Just a heading\n\nname: sneaky\n")
        assert parse_persona_file(path) is None

    def test_default_description(self, repo: Path) -> None:
        path = _write_persona(repo, "x.md", "---\nname: helper\n---\nBody\n")
        persona = parse_persona_file(path)
        assert persona is not None
        assert persona.when_to_use == "Sub-agent: helper"

    def test_invalid_tier_ignored(self, repo: Path) -> None:
        path = _write_persona(repo, "x.md", "---\nname: helper\nmodel: gpt-9\n---\nBody\n")
        persona = parse_persona_file(path)
        assert persona is not None
        assert persona.model is None

    def test_description_with_colons(self, repo: Path) -> None:
        path = _write_persona(
            repo,
            "x.md",
            "---\nname: planner\ndescription: Use when: planning a large change\n---\nPlan.\n",
        )
        persona = parse_persona_file(path)
        assert persona is not None
        assert persona.name == "planner"
        assert persona.when_to_use == "Use when: planning a large change"

    def test_crlf_line_endings(self, repo: Path) -> None:
        path = repo / "crlf.md"
        path.write_bytes(b"---\r\nname: windows\r\n---\r\nBody line\r\n")
        persona = parse_persona_file(path)
        assert persona is not None
        assert persona.name == "windows"
        assert persona.system_prompt == "Body line"

    def test_empty_body(self, repo: Path) -> None:
        path = _write_persona(repo, "x.md", "---\nname: bare\n---")
        persona = parse_persona_file(path)
        assert persona is not None
        assert persona.system_prompt == ""


class TestRenderAgentList:
    def test_one_line_per_persona(self) -> None:
        rendered = render_agent_list(BUILTIN_PERSONAS)
        lines = rendered.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("- general-purpose: ")
        assert lines[1].startswith("- explore: ")
        assert all(line.endswith(" (Tools: All)") for line in lines)
