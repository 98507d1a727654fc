"""
Command line interface for the changelog_gen tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``generate-changelog`` command. It orchestrates
repository detection, configuration loading, reading the release version,
collecting and grouping commits since the latest tag, rendering the
release entry and merging it into the changelog. Every failure class maps
to its own exit code.
"""

from __future__ import annotations

import datetime
import logging
import time
from pathlib import Path
from typing import List, Optional

import click

from changelog_gen import __version__
from changelog_gen.changelog.merger import ChangelogError, update_changelog_file
from changelog_gen.changelog.release import VersionFileError, build_release_metadata
from changelog_gen.changelog.render import RenderError, render_fragment
from changelog_gen.config.loader import ConfigError, load_config
from changelog_gen.grouping.commit_grouper import create_commit_groups
from changelog_gen.parsing.tokenizer import MalformedFieldError
from changelog_gen.pipeline import collect_commits
from changelog_gen.vcs.git_client import GitClient, GitError

# Create a module-level logger. Attach a null handler and disable
# propagation to avoid logging errors when the root logger's stream is
# closed (such as during unit tests). configure_logging() turns
# propagation back on for a CLI run.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 4
EXIT_VCS_FAILURE = 5
EXIT_VERSION_ERROR = 6
EXIT_LOG_FORMAT_ERROR = 7
EXIT_RENDER_ERROR = 8
EXIT_CHANGELOG_ERROR = 9


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Print a message when a step starts and its duration when it ends."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _printable(text: str) -> str:
    """Replace bytes that were not valid UTF-8 in git output for terminal display."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool) -> None:
    """Send package log records to a root handler at INFO, or DEBUG when ``verbose``."""
    # Use force=True to ensure handlers are reconfigured on subsequent
    # invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    # Package loggers are created with propagation disabled; opt them in.
    for name in list(logging.root.manager.loggerDict):
        if name == "changelog_gen" or name.startswith("changelog_gen."):
            logging.getLogger(name).propagate = True


def detect_repo(start_dir: Path) -> Path:
    """Return the Git repository root containing ``start_dir``.

    Raises
    ------
    click.exceptions.Exit
        With code EXIT_NO_REPO if no repository is found.
    """
    repo_root = GitClient.find_repo_root(start_dir)
    if repo_root is None:
        print_error(f"No Git repository found at or above: {start_dir}")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    print_success(f"Found Git repository at: {repo_root}")
    return repo_root


def resolve_path(repo_root: Path, value: str) -> Path:
    """Resolve a configured path relative to the repository root."""
    path = Path(value)
    return path if path.is_absolute() else repo_root / path


@click.command()
@click.option("--repo", "repo", type=click.Path(file_okay=False, path_type=Path),
              help="Repository to read history from (default: current directory).")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="JSON configuration file (default: .changelog_config.json in the repository root).")
@click.option("--changelog", "changelog_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Changelog document to update.")
@click.option("--version-file", "version_file", type=click.Path(dir_okay=False, path_type=Path),
              help="File containing the release version number.")
@click.option("--template", "template_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Custom jinja2 template for the release entry.")
@click.option("--since", "since", help="Revision to start from instead of the latest tag.")
@click.option("--date", "release_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Release date (default: today).")
@click.option("--dry-run", "dry_run", is_flag=True, help="Print the release entry instead of writing the changelog.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="generate-changelog")
def main(
    repo: Optional[Path],
    config_path: Optional[Path],
    changelog_path: Optional[Path],
    version_file: Optional[Path],
    template_path: Optional[Path],
    since: Optional[str],
    release_date: Optional[datetime.datetime],
    dry_run: bool,
    verbose: bool,
) -> None:
    """Generate the changelog entry for the upcoming release.

    Collects the commits since the latest tag, groups bug fixes and
    features, and inserts the rendered entry below the ``# Changelog``
    heading of the changelog document.
    """
    configure_logging(verbose)

    ctx = click.get_current_context(silent=True)

    total_steps = 7
    current_step = 0

    try:
        # Step 1: Detect repository
        current_step += 1
        print_step(current_step, total_steps, "Detecting Repository")
        repo_root = detect_repo(repo if repo is not None else Path.cwd())

        # Step 2: Load configuration
        current_step += 1
        print_step(current_step, total_steps, "Loading Configuration")
        try:
            config = load_config(repo_root, config_path)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        target = changelog_path if changelog_path is not None else resolve_path(repo_root, config.changelog_path)
        version_source = version_file if version_file is not None else resolve_path(repo_root, config.version_file)
        if template_path is None and config.template_path is not None:
            template_path = resolve_path(repo_root, config.template_path)

        print_success("Configuration loaded successfully")
        print_info(f"Changelog: {target}", indent=1)
        print_info(f"Ignored subjects: {len(config.ignore_list)}", indent=1)

        # Step 3: Release metadata
        current_step += 1
        print_step(current_step, total_steps, "Reading Release Version")
        try:
            metadata = build_release_metadata(
                version_source,
                today=release_date.date() if release_date is not None else None,
            )
        except VersionFileError as exc:
            print_error(f"Version error: {exc}")
            raise click.exceptions.Exit(EXIT_VERSION_ERROR)
        print_success(f"Release {metadata.version} dated {metadata.date}")

        # Step 4: Collect commits
        current_step += 1
        print_step(current_step, total_steps, "Collecting Commits")
        client = GitClient(repo_root)
        try:
            with ProgressIndicator(f"Reading history since {since or 'latest tag'}"):
                commits = collect_commits(client, config, since=since)
        except GitError as exc:
            print_error(f"VCS error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        except MalformedFieldError as exc:
            print_error(f"Unexpected git log output: {exc}")
            raise click.exceptions.Exit(EXIT_LOG_FORMAT_ERROR)
        print_success(f"Found {_plural(len(commits), 'commit')}")

        # Step 5: Group commits
        current_step += 1
        print_step(current_step, total_steps, "Grouping Commits")
        groups = create_commit_groups(commits)
        for group in groups:
            print_info(f"{group.title}: {_plural(len(group.commits), 'commit')}", indent=1)
        if not any(group.commits for group in groups):
            print_warning("No bug fixes or features since the last release")

        # Step 6: Render
        current_step += 1
        print_step(current_step, total_steps, "Rendering Release Entry")
        try:
            fragment = render_fragment(metadata, groups, template_path)
        except RenderError as exc:
            print_error(f"Template error: {exc}")
            raise click.exceptions.Exit(EXIT_RENDER_ERROR)
        print_success("Release entry rendered")

        # Step 7: Update changelog
        current_step += 1
        print_step(current_step, total_steps, "Updating Changelog")
        if dry_run:
            print_info("Dry run - changelog not modified")
            click.echo("")
            click.echo(_printable(fragment), nl=False)
            raise click.exceptions.Exit(EXIT_SUCCESS)

        try:
            with ProgressIndicator(f"Writing {target.name}"):
                update_changelog_file(target, fragment, config.heading, config.header)
        except ChangelogError as exc:
            print_error(f"Changelog error: {exc}")
            raise click.exceptions.Exit(EXIT_CHANGELOG_ERROR)

        summary_items: List[str] = [
            f"✓ Version: {metadata.version}",
            f"✓ Entries: {sum(len(group.commits) for group in groups)}",
            f"✓ Changelog: {target}",
        ]
        click.echo("")
        for item in summary_items:
            click.echo(f"  {item}")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
