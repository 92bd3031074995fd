"""Expansion of command templates the way a host runtime does it."""
import asyncio
import logging
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from agentshelf.exceptions import ToolPermissionError
from agentshelf.tools import is_command_allowed

from .models import CommandDocument
from .placeholders import (
    ARGUMENT_PATTERN,
    SHELL_PATTERN,
    TEMPLATE_PATTERN,
    is_file_reference,
    split_file_reference,
    uses_arguments,
)

logger = logging.getLogger(__name__)


@dataclass
class RenderedCommand:
    """Result of expanding a command template."""

    name: str
    prompt: str
    shell_outputs: list[tuple[str, str]] = field(default_factory=list)
    inlined_files: list[str] = field(default_factory=list)


def _argument_value(key: str, args: str, parts: list[str]) -> str:
    if key == "ARGUMENTS":
        return args
    index = int(key) - 1
    return parts[index] if index < len(parts) else ""


def substitute_args(prompt: str, args: str) -> str:
    """Substitute arguments into a command prompt.

    Handles both $ARGUMENTS (all args) and $1, $2, etc. (positional).
    Positions beyond the supplied words become empty. If no placeholders
    exist and args are provided, appends them to prompt.

    Args:
        prompt: The command template.
        args: User-provided arguments string.

    Returns:
        Prompt with arguments substituted.
    """
    has_placeholders = uses_arguments(prompt)
    parts = args.split()

    # Single pass so argument text is never substituted again
    prompt = ARGUMENT_PATTERN.sub(
        lambda match: _argument_value(match.group(1), args, parts), prompt
    )

    if args and not has_placeholders:
        prompt = f"{prompt}\n\nARGUMENTS: {args}"

    return prompt


def quote_shell_args(command: str, args: str) -> str:
    """Substitute arguments into a shell placeholder as quoted words."""
    parts = args.split()
    return ARGUMENT_PATTERN.sub(
        lambda match: shlex.quote(_argument_value(match.group(1), args, parts)),
        command,
    )


async def run_shell_command(
    command: str, cwd: Path | str | None = None, timeout: float = 30.0
) -> str:
    """Run a shell placeholder and return the text that replaces it."""
    proc = await asyncio.create_subprocess_shell(
        command,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning(f"Shell placeholder timed out after {timeout}s: {command}")
        return f"[timed out after {timeout:g}s]"

    if proc.returncode != 0:
        error = stderr.decode(errors="replace").strip()
        logger.warning(f"Shell placeholder exited with {proc.returncode}: {command}")
        return f"[exit {proc.returncode}] {error}".rstrip()

    return stdout.decode(errors="replace").rstrip()


def _read_reference(ref: str, base: Path) -> str | None:
    """Read a referenced file, refusing paths outside base."""
    if ref.startswith("~"):
        logger.warning(f"Not inlining @{ref}: outside {base}")
        return None

    path = (base / ref).resolve()
    if not path.is_relative_to(base):
        logger.warning(f"Not inlining @{ref}: outside {base}")
        return None
    if not path.is_file():
        return None

    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot inline {path}: {e}")
        return None


async def render_command(
    cmd: CommandDocument,
    args: str = "",
    cwd: Path | str | None = None,
    run_shell: bool = False,
    timeout: float = 30.0,
) -> RenderedCommand:
    """Expand a command into the prompt a host would send to the model.

    Arguments inside shell placeholders are inserted as quoted words, so
    they can never add shell syntax. File references are only taken from
    the template itself, never from arguments.

    Args:
        cmd: Command to render.
        args: User-provided arguments string.
        cwd: Working directory for shell placeholders and @file references.
            File references are only inlined when given, and only for files
            inside it.
        run_shell: Execute shell placeholders. Every placeholder must be
            permitted by the command's allowed-tools.
        timeout: Seconds allowed per shell placeholder.

    Returns:
        RenderedCommand with the final prompt.

    Raises:
        ToolPermissionError: A shell placeholder is not permitted.
    """
    rendered = RenderedCommand(name=cmd.qualified_name, prompt="")

    # Alternating template text and placeholder commands
    pieces = SHELL_PATTERN.split(cmd.prompt)
    texts = pieces[0::2]
    commands = [quote_shell_args(command.strip(), args) for command in pieces[1::2]]

    if run_shell:
        # Refuse before running anything
        for command in commands:
            if not is_command_allowed(cmd.allowed_tools, command):
                raise ToolPermissionError(
                    f"/{cmd.qualified_name}: '{command}' is not permitted by allowed-tools"
                )

        for command in commands:
            output = await run_shell_command(command, cwd=cwd, timeout=timeout)
            rendered.shell_outputs.append((command, output))

        replacements = [output for _, output in rendered.shell_outputs]
    else:
        replacements = [f"!`{command}`" for command in commands]

    base = Path(cwd).resolve() if cwd is not None else None
    parts = args.split()

    def replace(match: re.Match) -> str:
        if match.group(1) is not None:
            return _argument_value(match.group(1), args, parts)

        ref, trailing = split_file_reference(match.group(2))
        if base is None or not is_file_reference(ref) or ref in rendered.inlined_files:
            return match.group(0)
        content = _read_reference(ref, base)
        if content is None:
            return match.group(0)
        rendered.inlined_files.append(ref)
        return f"{ref}:\n```\n{content.rstrip()}\n```{trailing}"

    prompt = ""
    for index, text in enumerate(texts):
        prompt += TEMPLATE_PATTERN.sub(replace, text)
        if index < len(replacements):
            prompt += replacements[index]

    if args and not uses_arguments(cmd.prompt):
        prompt = f"{prompt}\n\nARGUMENTS: {args}"

    rendered.prompt = prompt
    return rendered
