"""``revisedlm init``: prepare the workspace and write the settings file."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Mapping, Sequence

from .core import config_templates
from .core import workspace as workspace_mod
from .settings import CONFIG_FILENAME


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="revisedlm init",
        description=(
            "Create the RevisedLM workspace and write a settings template "
            "to fill in with API mode and credentials."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (defaults to REVISEDLM_HOME or "
        "~/.revisedlm).",
    )
    parser.add_argument(
        "--path",
        type=Path,
        help="Write the settings file here instead of the workspace config "
        "directory.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing settings file.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _format_created(created: Mapping[str, bool], key: str) -> str:
    return "created" if created.get(key, False) else "exists"


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.workspace)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    target = args.path or layout.path_for("config") / CONFIG_FILENAME
    template = config_templates.get_template("settings")
    try:
        written = template.write(target.expanduser(), overwrite=args.force)
    except config_templates.ConfigTemplateError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        sys.stderr.write("Use --force to overwrite it.\n")
        return 1

    if args.quiet:
        return 0

    lines = [
        f"Workspace ready at {layout.home} "
        f"({_format_created(layout.created, 'home')})"
    ]
    width = max(len(name) for name in layout.directories)
    for name, directory in layout.items():
        status = _format_created(layout.created, name)
        lines.append(f"  {name.ljust(width)}  {directory} ({status})")
    lines.append(f"Settings template written to {written}")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
