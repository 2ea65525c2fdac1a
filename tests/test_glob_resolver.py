"""Tests for the globbing module."""

from __future__ import annotations

import os
from pathlib import Path

import pathspec
import pytest
from structlog.testing import capture_logs

from actionkit.globbing import GlobPatternError, GlobResolver, GlobResolverConfig, GlobResult


def _names(paths: list[Path] | tuple[Path, ...]) -> set[str]:
    return {p.name for p in paths}


def _rel(paths: list[Path] | tuple[Path, ...], root: Path) -> set[str]:
    return {p.relative_to(root.resolve()).as_posix() for p in paths}


def _make_flat(root: Path) -> None:
    for name in ["a.txt", "b.txt", "secret.txt", "c.md"]:
        (root / name).write_text(name)


def test_config_from_patterns():
    config = GlobResolverConfig.from_patterns(["*.txt"], iter(["secret.txt"]))
    assert config.include == ("*.txt",)
    assert config.exclude == ("secret.txt",)
    assert config.has_patterns


def test_config_without_includes_has_no_patterns():
    assert not GlobResolverConfig(exclude=("*.log",)).has_patterns


def test_include_and_exclude(tmp_path: Path):
    _make_flat(tmp_path)
    resolver = GlobResolver.from_patterns(["*.txt"], ["secret.txt"])

    result = resolver.resolve_detailed(tmp_path)
    assert _names(result.files) == {"a.txt", "b.txt"}
    assert result.has_patterns
    assert not result.is_empty
    assert result.has_matches


def test_resolve_returns_plain_list(tmp_path: Path):
    _make_flat(tmp_path)
    resolver = GlobResolver.from_patterns(["*.txt"], ["secret.txt"])
    files = resolver.resolve(tmp_path)
    assert isinstance(files, list)
    assert _names(files) == {"a.txt", "b.txt"}


def test_results_are_absolute_under_root(tmp_path: Path):
    _make_flat(tmp_path)
    files = GlobResolver.from_patterns(["*.md"]).resolve(str(tmp_path))
    assert len(files) == 1
    assert files[0].is_absolute()
    assert files[0] == tmp_path.resolve() / "c.md"


def test_no_include_patterns(tmp_path: Path):
    _make_flat(tmp_path)
    result = GlobResolver.from_patterns([], ["*.txt"]).resolve_detailed(tmp_path)
    assert result == GlobResult(files=(), has_patterns=False)
    assert result.is_empty
    assert not result.has_patterns


def test_patterns_without_matches(tmp_path: Path):
    _make_flat(tmp_path)
    result = GlobResolver.from_patterns(["*.xyz"]).resolve_detailed(tmp_path)
    assert result.has_patterns
    assert result.is_empty
    assert not result.has_matches


def test_overlapping_includes_deduplicated(tmp_path: Path):
    _make_flat(tmp_path)
    files = GlobResolver.from_patterns(["*.txt", "a.*"]).resolve(tmp_path)
    assert sorted(p.name for p in files) == ["a.txt", "b.txt", "secret.txt"]


def test_symlinked_file_listed_once(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    try:
        os.symlink(tmp_path / "a.txt", tmp_path / "z.txt")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")
    files = GlobResolver.from_patterns(["*.txt"]).resolve(tmp_path)
    assert files == [tmp_path.resolve() / "a.txt"]


def test_sorted_output(tmp_path: Path):
    for name in ["c.txt", "a.txt", "b.txt"]:
        (tmp_path / name).write_text(name)
    files = GlobResolver.from_patterns(["*.txt"]).resolve(tmp_path)
    assert files == sorted(files)


def test_repeated_queries_are_stable(tmp_path: Path):
    _make_flat(tmp_path)
    resolver = GlobResolver.from_patterns(["*.txt", "*.md"], ["secret.txt"])
    assert resolver.resolve(tmp_path) == resolver.resolve(tmp_path)


def test_slash_free_pattern_matches_top_level_only(tmp_path: Path):
    sub = tmp_path / "docs" / "deep"
    sub.mkdir(parents=True)
    (tmp_path / "top.md").write_text("#")
    (sub / "nested.md").write_text("#")
    files = GlobResolver.from_patterns(["*.md"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"top.md"}


def test_double_star_matches_at_any_depth(tmp_path: Path):
    sub = tmp_path / "docs" / "deep"
    sub.mkdir(parents=True)
    (tmp_path / "top.md").write_text("#")
    (sub / "nested.md").write_text("#")
    files = GlobResolver.from_patterns(["**/*.md"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"top.md", "docs/deep/nested.md"}


def test_top_level_include_and_exclude_leave_nested_files_alone(tmp_path: Path):
    (tmp_path / "a.txt").write_text("")
    (tmp_path / "secret.txt").write_text("")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("")
    (sub / "secret.txt").write_text("")

    files = GlobResolver.from_patterns(["*.txt"], ["secret.txt"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"a.txt"}

    files = GlobResolver.from_patterns(["**/*.txt"], ["secret.txt"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"a.txt", "sub/b.txt", "sub/secret.txt"}


def test_star_does_not_match_inside_matching_directory(tmp_path: Path):
    (tmp_path / "top.txt").write_text("")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "inner.txt").write_text("")
    dotted = tmp_path / "notes.txt"
    dotted.mkdir()
    (dotted / "inside.md").write_text("")
    assert _rel(GlobResolver.from_patterns(["*"]).resolve(tmp_path), tmp_path) == {"top.txt"}
    assert _rel(GlobResolver.from_patterns(["*.txt"]).resolve(tmp_path), tmp_path) == {"top.txt"}
    assert _rel(GlobResolver.from_patterns(["**/*.txt"]).resolve(tmp_path), tmp_path) == {
        "top.txt",
        "sub/inner.txt",
    }


def test_leading_slash_and_dot_slash_are_root_relative(tmp_path: Path):
    _make_flat(tmp_path)
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.md").write_text("")
    for pattern in ["/c.md", "./c.md", "c.md"]:
        files = GlobResolver.from_patterns([pattern]).resolve(tmp_path)
        assert _rel(files, tmp_path) == {"c.md"}


def test_nested_exclude_needs_double_star(tmp_path: Path):
    keep = tmp_path / "keep"
    keep.mkdir()
    (keep / "a.txt").write_text("")
    (keep / "a.log").write_text("")
    drafts = tmp_path / "sub" / "drafts"
    drafts.mkdir(parents=True)
    (drafts / "wip.txt").write_text("")
    files = GlobResolver.from_patterns(["**/*"], ["**/*.log", "**/drafts/"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"keep/a.txt"}


def test_double_star_and_question_mark(tmp_path: Path):
    src = tmp_path / "src" / "pkg"
    src.mkdir(parents=True)
    (src / "a1.py").write_text("")
    (src / "a22.py").write_text("")
    (tmp_path / "a3.py").write_text("")
    files = GlobResolver.from_patterns(["src/**/a?.py"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"src/pkg/a1.py"}


def test_directory_pattern_includes_contents(tmp_path: Path):
    docs = tmp_path / "docs"
    (docs / "api").mkdir(parents=True)
    (docs / "index.md").write_text("#")
    (docs / "api" / "ref.md").write_text("#")
    (tmp_path / "README.md").write_text("#")
    files = GlobResolver.from_patterns(["docs/"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"docs/index.md", "docs/api/ref.md"}


def test_excluded_directory_is_pruned(tmp_path: Path):
    (tmp_path / "keep.md").write_text("#")
    drafts = tmp_path / "drafts" / "old"
    drafts.mkdir(parents=True)
    (drafts / "wip.md").write_text("#")
    files = GlobResolver.from_patterns(["**/*.md"], ["drafts/"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"keep.md"}


def test_exclude_wildcard_at_depth(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "keep.txt").write_text("")
    (sub / "skip.log").write_text("")
    files = GlobResolver.from_patterns(["**/*"], ["**/*.log"]).resolve(tmp_path)
    assert _rel(files, tmp_path) == {"sub/keep.txt"}


def test_default_directory_is_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_flat(tmp_path)
    monkeypatch.chdir(tmp_path)
    files = GlobResolver.from_patterns(["*.md"]).resolve()
    assert _names(files) == {"c.md"}


def test_missing_directory_yields_no_matches(tmp_path: Path):
    result = GlobResolver.from_patterns(["*.txt"]).resolve_detailed(tmp_path / "gone")
    assert result.has_patterns
    assert result.is_empty


def test_file_as_directory_yields_no_matches(tmp_path: Path):
    f = tmp_path / "a.txt"
    f.write_text("a")
    assert GlobResolver.from_patterns(["*"]).resolve(f) == []


def test_walk_errors_are_logged_not_raised(tmp_path: Path):
    with capture_logs() as logs:
        GlobResolver.from_patterns(["*"]).resolve(tmp_path / "missing")
    assert any(entry["event"] == "glob_walk_error" for entry in logs)


def test_unreadable_subdirectory_skipped(tmp_path: Path):
    if os.getuid() == 0:
        pytest.skip("root can read any directory")
    (tmp_path / "ok.txt").write_text("")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "hidden.txt").write_text("")
    locked.chmod(0o000)
    try:
        files = GlobResolver.from_patterns(["*.txt"]).resolve(tmp_path)
        assert _names(files) == {"ok.txt"}
    finally:
        locked.chmod(0o755)


def test_patterns_compiled_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _make_flat(tmp_path)
    calls: list[object] = []
    original = pathspec.PathSpec.from_lines

    def counting_from_lines(*args: object, **kwargs: object) -> pathspec.PathSpec:
        calls.append(args)
        return original(*args, **kwargs)  # pyright: ignore[reportArgumentType]

    monkeypatch.setattr(pathspec.PathSpec, "from_lines", counting_from_lines)
    resolver = GlobResolver.from_patterns(["*.txt"], ["secret.txt"])
    compiled = len(calls)
    for _ in range(5):
        resolver.resolve(tmp_path)
    assert compiled > 0
    assert len(calls) == compiled


@pytest.mark.parametrize(
    "pattern",
    ["", "   ", "!*.txt", "/", "a/***/b", "[abc", "*.tx[", "trailing\\"],
)
def test_invalid_include_pattern_fails_fast(pattern: str):
    with pytest.raises(GlobPatternError) as excinfo:
        GlobResolver.from_patterns([pattern])
    assert "include" in str(excinfo.value).lower()


def test_invalid_exclude_pattern_fails_fast():
    with pytest.raises(GlobPatternError, match="exclude"):
        GlobResolver.from_patterns(["*.txt"], ["!keep.txt"])


def test_glob_pattern_error_is_value_error():
    with pytest.raises(ValueError):
        GlobResolver.from_patterns(["[oops"])


@pytest.mark.parametrize("pattern", ["[abc].txt", "[!a]*.md", "[]].txt", "\\[literal\\].txt"])
def test_bracket_patterns_accepted(pattern: str):
    GlobResolver.from_patterns([pattern])


def test_bracket_class_matches(tmp_path: Path):
    for name in ["a.txt", "b.txt", "c.txt"]:
        (tmp_path / name).write_text("")
    files = GlobResolver.from_patterns(["[ab].txt"]).resolve(tmp_path)
    assert _names(files) == {"a.txt", "b.txt"}
