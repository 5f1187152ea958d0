"""Shared fixtures for building skill trees on disk."""

from collections.abc import Callable
from pathlib import Path

import pytest

MakeSkill = Callable[..., Path]


def render_skill(
    name: str | None,
    description: str | None = "Use this skill to talk to the Opper API.",
    body_lines: int = 3,
) -> str:
    """Render SKILL.md text with the given frontmatter and filler body."""
    lines = ["---"]
    if name is not None:
        lines.append(f"name: {name}")
    if description is not None:
        lines.append(f"description: {description}")
    lines.append("---")
    lines.extend(f"Body line {i}" for i in range(body_lines))
    return "\n".join(lines) + "\n"


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    root = tmp_path / "skills"
    root.mkdir()
    return root


@pytest.fixture
def make_skill(skills_root: Path) -> MakeSkill:
    """Create <skills_root>/<dir_name>/SKILL.md and return its path.

    Pass ``text`` to write raw content instead of the rendered template.
    """

    def _make(dir_name: str, text: str | None = None, **kwargs: object) -> Path:
        skill_dir = skills_root / dir_name
        skill_dir.mkdir(parents=True, exist_ok=True)
        skill_md = skill_dir / "SKILL.md"
        if text is None:
            kwargs.setdefault("name", dir_name)
            text = render_skill(**kwargs)  # type: ignore[arg-type]
        skill_md.write_text(text, encoding="utf-8")
        return skill_md

    return _make
