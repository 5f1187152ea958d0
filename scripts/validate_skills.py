#!/usr/bin/env python3
"""
Agent Skills Validation - Skill Frontmatter Validator

Validates every <root>/<skill-dir>/SKILL.md against the skills conventions:

1. SKILL.md is at most 500 lines
2. frontmatter 'name' is present and equals the directory name
3. 'name' is lowercase alphanumeric and hyphens only
4. frontmatter 'description' is at most 1024 characters

Frontmatter is read as plain text: only 'name' and 'description' are
extracted, either inline or as a one-level folded ('>') / literal ('|')
block of indented continuation lines.

Usage:
    uv run python scripts/validate_skills.py
    uv run python scripts/validate_skills.py path/to/skills-root/ --verbose
    uv run python scripts/validate_skills.py path/to/skills-root/ --json

Exit codes:
    0 - All skill files are valid
    1 - One or more validation errors
    2 - Skills root unreadable or invalid config
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from skills_validation_common import (
    EXIT_FATAL,
    NAME_PATTERN,
    ConfigError,
    FatalIOError,
    ValidationReport,
    ValidatorConfig,
    colorize,
    format_result,
    get_repo_root,
    load_config,
)

FRONTMATTER_DELIMITER = "---"

# Bare block scalar indicators that move the value onto the following lines
NAME_BLOCK_INDICATORS = {">"}
DESCRIPTION_BLOCK_INDICATORS = {">", "|"}

# ASCII whitespace only; no-break and other Unicode spaces are content
INDENT_CHARS = " \t\v\f\r"


@dataclass
class SkillRecord:
    """Metadata extracted from one skill file."""

    path: Path
    directory_name: str
    raw_metadata_block: str
    declared_name: str
    declared_description: str
    line_count: int
    has_frontmatter: bool


def split_lines(text: str) -> list[str]:
    """Split file content into lines, ignoring a final newline and CRLF endings."""
    if not text:
        return []
    lines = text.replace("\r\n", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def extract_frontmatter(lines: list[str]) -> tuple[list[str], bool]:
    """Return the lines strictly between the first two '---' lines.

    Returns:
        Tuple of (block_lines, found). ``([], False)`` when fewer than
        two delimiter lines exist.
    """
    start: int | None = None
    for i, line in enumerate(lines):
        if line != FRONTMATTER_DELIMITER:
            continue
        if start is None:
            start = i
        else:
            return lines[start + 1 : i], True
    return [], False


def _field_remainder(line: str, field_name: str) -> str | None:
    prefix = f"{field_name}:"
    if not line.startswith(prefix):
        return None
    return line[len(prefix) :].strip(INDENT_CHARS)


def extract_name(block: list[str]) -> str:
    """Extract the 'name' value, inline or from the next (folded) line."""
    for i, line in enumerate(block):
        value = _field_remainder(line, "name")
        if value is None:
            continue
        if value and value not in NAME_BLOCK_INDICATORS:
            return value
        if i + 1 < len(block):
            return block[i + 1].strip(INDENT_CHARS)
        return ""
    return ""


def extract_description(block: list[str]) -> str:
    """Extract the 'description' value.

    A block scalar is rebuilt from the indented lines that follow it, each
    stripped of leading whitespace and joined with a single space. The first
    non-indented line (or a blank one) ends the block.
    """
    for i, line in enumerate(block):
        value = _field_remainder(line, "description")
        if value is None:
            continue
        if value and value not in DESCRIPTION_BLOCK_INDICATORS:
            return value
        parts: list[str] = []
        for continuation in block[i + 1 :]:
            if not continuation or continuation[0] not in INDENT_CHARS:
                break
            parts.append(continuation.lstrip(INDENT_CHARS))
        return " ".join(parts)
    return ""


def parse_skill_text(path: Path, text: str) -> SkillRecord:
    """Build a SkillRecord from the text of a skill file."""
    lines = split_lines(text)
    block, found = extract_frontmatter(lines)
    return SkillRecord(
        path=path,
        directory_name=path.parent.name,
        raw_metadata_block="\n".join(block),
        declared_name=extract_name(block),
        declared_description=extract_description(block),
        line_count=len(lines),
        has_frontmatter=found,
    )


def read_skill_record(path: Path) -> SkillRecord:
    """Read and parse a skill file.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    return parse_skill_text(path, path.read_bytes().decode("utf-8"))


# =============================================================================
# Checks
# =============================================================================


def check_line_count(record: SkillRecord, config: ValidatorConfig, report: ValidationReport, label: str) -> None:
    if record.line_count > config.max_lines:
        report.error(
            "STRUCTURE",
            f"{label} has {record.line_count} lines (max {config.max_lines})",
            label,
        )
    else:
        report.ok(f"{label} line count OK ({record.line_count} lines)", label)


def check_name_matches_directory(record: SkillRecord, report: ValidationReport, label: str) -> None:
    name = record.declared_name
    expected = record.directory_name
    if not name:
        if record.has_frontmatter:
            message = f"{label} missing 'name' field in frontmatter (expected '{expected}')"
        else:
            message = f"{label} has no frontmatter block (expected name '{expected}')"
        report.error("NAME_MISMATCH", message, label)
    elif name != expected:
        report.error("NAME_MISMATCH", f"{label} has name '{name}' but directory is '{expected}'", label)
    else:
        report.ok(f"{label} name matches directory: {name}", label)


def check_name_format(record: SkillRecord, report: ValidationReport, label: str) -> None:
    name = record.declared_name
    # An empty name is already reported as missing
    if not name:
        return
    if not NAME_PATTERN.match(name):
        report.error(
            "NAME_FORMAT",
            f"{label} name '{name}' must be lowercase alphanumeric and hyphens only",
            label,
        )
    else:
        report.ok(f"{label} name format OK", label)


def check_description_length(
    record: SkillRecord, config: ValidatorConfig, report: ValidationReport, label: str
) -> None:
    length = len(record.declared_description)
    if length > config.max_description_chars:
        report.error(
            "DESCRIPTION_LENGTH",
            f"{label} description is {length} chars (max {config.max_description_chars})",
            label,
        )
    else:
        report.ok(f"{label} description length OK ({length} chars)", label)


def check_skill_record(record: SkillRecord, config: ValidatorConfig, report: ValidationReport) -> None:
    """Run every check on a record. Checks never short-circuit each other."""
    label = f"{record.directory_name}/{record.path.name}"
    check_line_count(record, config, report, label)
    check_name_matches_directory(record, report, label)
    check_name_format(record, report, label)
    check_description_length(record, config, report, label)


def validate_skill_file(skill_file: Path, config: ValidatorConfig, report: ValidationReport) -> SkillRecord | None:
    """Validate a single skill file, adding results to ``report``.

    Returns:
        The parsed SkillRecord, or None if the file could not be read
    """
    label = f"{skill_file.parent.name}/{skill_file.name}"
    report.files_checked.append(label)
    try:
        record = read_skill_record(skill_file)
    except UnicodeDecodeError as e:
        report.error("UNREADABLE", f"{label} is not valid UTF-8: {e}", label)
        return None
    except OSError as e:
        report.error("UNREADABLE", f"{label} cannot be read: {e.strerror or e}", label)
        return None

    check_skill_record(record, config, report)
    return record


# =============================================================================
# Discovery
# =============================================================================


def discover_skill_files(root: Path, skill_filename: str) -> list[Path]:
    """Find <root>/<dir>/<skill_filename> files, sorted by directory name.

    Hidden directories and directories without a skill file are skipped.

    Raises:
        FatalIOError: If ``root`` cannot be listed
    """
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FatalIOError(f"Cannot list skills root {root}: {e.strerror or e}") from e

    skill_files = []
    for entry in entries:
        if entry.name.startswith(".") or not entry.is_dir():
            continue
        candidate = entry / skill_filename
        if candidate.is_file():
            skill_files.append(candidate)
    return skill_files


def validate(root: Path, config: ValidatorConfig | None = None) -> ValidationReport:
    """Validate every skill file under ``root``.

    Args:
        root: Directory holding one subdirectory per skill
        config: Limits to apply (defaults when None)

    Returns:
        ValidationReport with all results

    Raises:
        FatalIOError: If ``root`` cannot be listed
    """
    if config is None:
        config = ValidatorConfig()
    report = ValidationReport()
    for skill_file in discover_skill_files(root, config.skill_filename):
        validate_skill_file(skill_file, config, report)
    return report


# =============================================================================
# Output
# =============================================================================


def print_results(
    report: ValidationReport,
    config: ValidatorConfig,
    verbose: bool = False,
    use_color: bool = False,
) -> None:
    """Print one line per error, then the final status line."""
    if verbose:
        print(f"Checked {len(report.files_checked)} {config.skill_filename} file(s)")
    for result in report.results:
        if not result.is_error and not verbose:
            continue
        print(format_result(result, use_color))

    errors = report.errors
    if errors:
        print()
        print(colorize(f"Validation failed with {len(errors)} error(s)", "ERROR", use_color))
        return
    print(colorize(f"All {config.skill_filename} files are valid", "PASSED", use_color))


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate SKILL.md frontmatter for every skill directory")
    parser.add_argument(
        "root",
        nargs="?",
        help="Skills root directory (default: parent of the scripts/ directory)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show all results including passed checks",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--config", help="Path to a YAML config file overriding the default limits")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    args = parser.parse_args(argv)

    root = Path(args.root) if args.root else get_repo_root()

    try:
        config = load_config(Path(args.config) if args.config else None, root)
        report = validate(root, config)
    except (ConfigError, FatalIOError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL

    if args.json:
        print(report.to_json())
    else:
        use_color = not args.no_color and sys.stdout.isatty()
        print_results(report, config, args.verbose, use_color)

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
