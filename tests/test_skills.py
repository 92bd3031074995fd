"""Test skill documents module."""
import pytest
from pathlib import Path

from agentshelf.config import Config, DiscoveryConfig
from agentshelf.exceptions import DocumentError, DocumentNotFoundError
from agentshelf.skills import (
    SkillRegistry,
    load_reference,
    parse_skill_file,
    scan_skills,
)
from agentshelf.tools import ToolRule

PDF_SKILL = """---
name: pdf-processing
description: Extract text and tables from PDF files. Use when working with PDFs or forms.
allowed-tools: Read, Bash(python:*)
license: MIT
version: 1.2
---
# PDF Processing

For form filling see [forms](reference/forms.md).
API details live in [the reference](reference/api.md#tables).
Background: [format](https://example.com/pdf).
"""


def make_skill(root: Path, name: str, content: str) -> Path:
    skill_dir = root / name
    skill_dir.mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(content)
    return skill_dir


def simple_skill(name: str, description: str) -> str:
    return f"---\nname: {name}\ndescription: {description}\n---\nSteps.\n"


def test_parse_skill_file(tmp_path):
    """SKILL.md frontmatter and body are parsed."""
    skill_dir = make_skill(tmp_path, "pdf-processing", PDF_SKILL)
    (skill_dir / "reference").mkdir()
    (skill_dir / "reference" / "forms.md").write_text("Forms.")

    skill = parse_skill_file(skill_dir / "SKILL.md", source="project")

    assert skill.name == "pdf-processing"
    assert skill.declared_name == "pdf-processing"
    assert skill.description.startswith("Extract text")
    assert skill.body.startswith("# PDF Processing")
    assert skill.allowed_tools == [ToolRule("Read"), ToolRule("Bash", "python:*")]
    assert skill.license == "MIT"
    assert skill.metadata == {"version": 1.2}
    assert skill.source == "project"
    assert skill.directory == skill_dir


def test_parse_skill_file_references(tmp_path):
    """Local links become references with existence flags."""
    skill_dir = make_skill(tmp_path, "pdf-processing", PDF_SKILL)
    (skill_dir / "reference").mkdir()
    (skill_dir / "reference" / "forms.md").write_text("Forms.")

    skill = parse_skill_file(skill_dir)

    targets = [(ref.target, ref.exists) for ref in skill.references]
    assert targets == [("reference/forms.md", True), ("reference/api.md", False)]
    assert [ref.target for ref in skill.broken_references] == ["reference/api.md"]


def test_parse_skill_file_name_falls_back_to_directory(tmp_path):
    """Skills without a name use their directory name."""
    skill_dir = make_skill(tmp_path, "changelog", "---\ndescription: Use when releasing.\n---\nWrite it.")

    skill = parse_skill_file(skill_dir)

    assert skill.name == "changelog"
    assert skill.declared_name is None


def test_parse_skill_file_missing(tmp_path):
    """Missing SKILL.md raises DocumentError."""
    (tmp_path / "empty").mkdir()

    with pytest.raises(DocumentError):
        parse_skill_file(tmp_path / "empty")


def test_load_reference(tmp_path):
    """Reference files are read relative to the skill."""
    skill_dir = make_skill(tmp_path, "pdf-processing", PDF_SKILL)
    (skill_dir / "reference").mkdir()
    (skill_dir / "reference" / "forms.md").write_text("Fill fields.")
    skill = parse_skill_file(skill_dir)

    assert load_reference(skill, "reference/forms.md") == "Fill fields."
    assert load_reference(skill, "reference/forms.md#top") == "Fill fields."


def test_load_reference_missing(tmp_path):
    """Missing references raise DocumentNotFoundError."""
    skill = parse_skill_file(make_skill(tmp_path, "pdf-processing", PDF_SKILL))

    with pytest.raises(DocumentNotFoundError):
        load_reference(skill, "reference/api.md")


def test_load_reference_outside_skill(tmp_path):
    """References may not escape the skill directory."""
    (tmp_path / "secret.txt").write_text("nope")
    skill = parse_skill_file(make_skill(tmp_path, "pdf-processing", PDF_SKILL))

    with pytest.raises(DocumentError, match="outside"):
        load_reference(skill, "../secret.txt")


def test_scan_skills_personal_and_project(tmp_path, monkeypatch):
    """Project skills override personal skills with the same name."""
    home = tmp_path / "home"
    monkeypatch.setattr(Path, "home", lambda: home)
    make_skill(home / ".claude" / "skills", "review", simple_skill("review", "Personal. Use when reviewing."))
    make_skill(home / ".claude" / "skills", "commit", simple_skill("commit", "Use when committing."))

    project = tmp_path / "proj"
    make_skill(project / ".claude" / "skills", "review", simple_skill("review", "Project. Use when reviewing."))

    skills = {s.name: s for s in scan_skills(project_path=project)}

    assert set(skills) == {"review", "commit"}
    assert skills["review"].source == "project"
    assert skills["review"].description.startswith("Project")
    assert skills["commit"].source == "personal"


def test_scan_skills_plugins(tmp_path, monkeypatch):
    """Plugin skills are namespaced by plugin."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    skills_dir = tmp_path / ".claude" / "plugins" / "docs-kit" / "skills"
    make_skill(skills_dir, "api-docs", simple_skill("api-docs", "Use when documenting APIs."))

    skills = scan_skills()

    assert [s.qualified_name for s in skills] == ["docs-kit:api-docs"]
    assert skills[0].source == "plugin"


def test_scan_skills_extra_dirs(tmp_path, monkeypatch):
    """Configured skill_dirs are scanned as personal skills."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")
    extra = tmp_path / "team-skills"
    make_skill(extra, "deploy", simple_skill("deploy", "Use when deploying."))

    config = Config(discovery=DiscoveryConfig(skill_dirs=[str(extra)]))

    assert [s.name for s in scan_skills(config=config)] == ["deploy"]


def test_scan_skills_skips_broken(tmp_path, monkeypatch):
    """Unparseable skills are skipped."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    root = tmp_path / ".claude" / "skills"
    make_skill(root, "good", simple_skill("good", "Use when good."))
    make_skill(root, "bad", "---\nname: [bad\n---\nx")

    assert [s.name for s in scan_skills()] == ["good"]


def test_registry_find_ranks_by_trigger_text(tmp_path, monkeypatch):
    """find() ranks skills by overlap with name and description."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    root = tmp_path / ".claude" / "skills"
    make_skill(root, "pdf-processing", simple_skill(
        "pdf-processing", "Extract text from PDF files. Use when working with PDFs."))
    make_skill(root, "commit-messages", simple_skill(
        "commit-messages", "Write git commit messages. Use when committing changes."))
    make_skill(root, "react-conventions", simple_skill(
        "react-conventions", "React and Zustand conventions for web apps."))

    registry = SkillRegistry()
    assert registry.refresh() == 3

    matches = registry.find("write a commit message for my git changes")

    assert matches[0].name == "commit-messages"
    assert all(m.name != "react-conventions" for m in matches)


def test_registry_find_empty_query():
    """Queries of only stop words match nothing."""
    registry = SkillRegistry()

    assert registry.find("when to use the") == []


def test_registry_get(tmp_path, monkeypatch):
    """get() returns skills by qualified name."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    make_skill(tmp_path / ".claude" / "skills", "lint", simple_skill("lint", "Use when linting."))

    registry = SkillRegistry()
    registry.refresh()

    assert registry.get("lint").name == "lint"
    assert registry.get("missing") is None
