"""Placeholder syntax recognised in command bodies."""
import re

ARGUMENT_PATTERN = re.compile(r"\$(ARGUMENTS|[1-9])(?!\d)")
SHELL_PATTERN = re.compile(r"!`([^`\n]+)`")
# @path tokens: must start a word and look like a file (contain . or /)
FILE_REF_PATTERN = re.compile(r"(?<![\w@`])@([\w~\-][\w./~\-]*)")
# Argument placeholders and file references in one pass
TEMPLATE_PATTERN = re.compile(f"{ARGUMENT_PATTERN.pattern}|{FILE_REF_PATTERN.pattern}")


def uses_arguments(prompt: str) -> bool:
    """Check whether a prompt contains $ARGUMENTS or $1..$9."""
    return bool(ARGUMENT_PATTERN.search(prompt))


def find_shell_invocations(text: str) -> list[str]:
    """Return the commands of all ``!`cmd``` placeholders, in order."""
    return [match.group(1).strip() for match in SHELL_PATTERN.finditer(text)]


def split_file_reference(token: str) -> tuple[str, str]:
    """Split trailing punctuation off an ``@path`` token."""
    ref = token.rstrip(".,;:")
    return ref, token[len(ref):]


def is_file_reference(ref: str) -> bool:
    return "." in ref or "/" in ref


def find_file_references(text: str) -> list[str]:
    """Return the distinct paths of ``@path`` references, in order."""
    refs = []
    for match in FILE_REF_PATTERN.finditer(text):
        ref, _ = split_file_reference(match.group(1))
        if is_file_reference(ref) and ref not in refs:
            refs.append(ref)
    return refs
