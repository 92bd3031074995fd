"""Test allowed-tools parsing and dangerous command detection."""
import pytest
from agentshelf.tools import (
    DANGEROUS_PATTERNS,
    ToolRule,
    find_matched_pattern,
    is_command_allowed,
    is_dangerous_command,
    parse_allowed_tools,
    split_shell_command,
)


def test_parse_allowed_tools_string():
    """Comma separated rules are parsed in order."""
    rules = parse_allowed_tools("Bash(git add:*), Bash(git status:*), Read")

    assert rules == [
        ToolRule("Bash", "git add:*"),
        ToolRule("Bash", "git status:*"),
        ToolRule("Read"),
    ]


def test_parse_allowed_tools_keeps_commas_inside_parens():
    """Commas inside a specifier do not split the rule."""
    rules = parse_allowed_tools("Bash(echo a, b), Grep")

    assert rules == [ToolRule("Bash", "echo a, b"), ToolRule("Grep")]


def test_parse_allowed_tools_space_separated():
    """Space separated tool names are accepted."""
    rules = parse_allowed_tools("Read Grep Glob")

    assert [r.tool for r in rules] == ["Read", "Grep", "Glob"]


def test_parse_allowed_tools_list():
    """YAML lists are accepted."""
    rules = parse_allowed_tools(["Bash(git diff:*)", "Edit"])

    assert rules == [ToolRule("Bash", "git diff:*"), ToolRule("Edit")]


def test_parse_allowed_tools_none():
    """Missing value gives no rules."""
    assert parse_allowed_tools(None) == []


def test_parse_allowed_tools_rejects_mapping():
    """Non string/list values raise ValueError."""
    with pytest.raises(ValueError):
        parse_allowed_tools({"Bash": True})


def test_parse_allowed_tools_skips_garbage():
    """Unparseable entries are skipped."""
    rules = parse_allowed_tools("Read, ???")

    assert rules == [ToolRule("Read")]


def test_tool_rule_str_roundtrip():
    """Rules render back to their declaration."""
    assert str(ToolRule("Bash", "git add:*")) == "Bash(git add:*)"
    assert str(ToolRule("Read")) == "Read"


def test_tool_rule_known_tools():
    """Built-in and MCP tools are known."""
    assert ToolRule("Read").is_known is True
    assert ToolRule("mcp__github__create_issue").is_known is True
    assert ToolRule("Teleport").is_known is False


def test_bash_prefix_rule():
    """:* grants a command prefix."""
    rule = ToolRule("Bash", "git add:*")

    assert rule.matches("Bash", "git add .") is True
    assert rule.matches("Bash", "git add") is True
    assert rule.matches("Bash", "git  add   -A") is True
    assert rule.matches("Bash", "git addition") is False
    assert rule.matches("Bash", "git commit") is False


def test_bash_exact_rule():
    """Specifier without wildcard grants one command line."""
    rule = ToolRule("Bash", "git status")

    assert rule.matches("Bash", "git status") is True
    assert rule.matches("Bash", "git status --short") is False


def test_unrestricted_rule_matches_anything():
    """Rule without specifier grants the whole tool."""
    rule = ToolRule("Bash")

    assert rule.matches("Bash", "rm -rf /tmp/x") is True
    assert rule.matches("Read") is False


def test_restricted_rule_needs_argument():
    """Restricted rules do not grant unspecified use."""
    assert ToolRule("Bash", "git log:*").matches("Bash") is False


def test_file_rule_uses_glob():
    """File tool specifiers are glob patterns."""
    rule = ToolRule("Read", "src/**")

    assert rule.matches("Read", "src/app/main.py") is True
    assert rule.matches("Read", "tests/test_app.py") is False


def test_split_shell_command():
    """Chained commands are split on control operators."""
    assert split_shell_command("git status && git diff | head; ls") == [
        "git status",
        "git diff",
        "head",
        "ls",
    ]


def test_is_command_allowed():
    """Every chained command must be permitted."""
    rules = parse_allowed_tools("Bash(git status:*), Bash(git diff:*)")

    assert is_command_allowed(rules, "git status") is True
    assert is_command_allowed(rules, "git diff HEAD") is True
    assert is_command_allowed(rules, "git status && git diff") is True
    assert is_command_allowed(rules, "git status && rm -rf /") is False
    assert is_command_allowed(rules, "git log") is False


def test_split_shell_command_background_operator():
    """A single & runs a second command."""
    assert split_shell_command("git status & rm -rf ~") == ["git status", "rm -rf ~"]
    assert split_shell_command("git status&&(rm -rf ~)") == ["git status", "rm -rf ~ )"]


def test_split_shell_command_keeps_quotes_and_redirects():
    """Quoted operators and redirections do not split."""
    assert split_shell_command("git commit -m 'a; b && c'") == ["git commit -m a; b && c"]
    assert split_shell_command("make test 2>&1 | tail") == ["make test 2 >& 1", "tail"]


def test_is_command_allowed_rejects_background_chain():
    rules = parse_allowed_tools("Bash(git status:*)")

    assert is_command_allowed(rules, "git status & rm -rf ~") is False
    assert is_command_allowed(rules, "git status&rm -rf ~") is False


@pytest.mark.parametrize("command", [
    "git status $(rm -rf ~)",
    "git status `rm -rf ~`",
    "git status <(rm -rf ~)",
    "git status >(rm -rf ~)",
    "git status '$(whoami)'",
])
def test_is_command_allowed_rejects_substitution(command):
    """Command and process substitution are never permitted."""
    rules = parse_allowed_tools("Bash(git status:*)")

    assert is_command_allowed(rules, command) is False


def test_is_command_allowed_unbalanced_quotes():
    rules = parse_allowed_tools("Bash(echo:*)")

    assert is_command_allowed(rules, "echo 'open") is False


def test_is_command_allowed_quoted_argument():
    """Separators inside quotes belong to the argument."""
    rules = parse_allowed_tools("Bash(echo:*)")

    assert is_command_allowed(rules, "echo 'HEAD; rm -rf ~'") is True


def test_is_command_allowed_ignores_other_tools():
    """Only Bash rules grant shell commands."""
    rules = parse_allowed_tools("Read, Write")

    assert is_command_allowed(rules, "cat file.txt") is False


def test_dangerous_patterns_exist():
    """DANGEROUS_PATTERNS contains expected patterns."""
    assert "rm -rf" in DANGEROUS_PATTERNS
    assert "sudo" in DANGEROUS_PATTERNS
    assert "git push --force" in DANGEROUS_PATTERNS


def test_is_dangerous_command_matches():
    """is_dangerous_command detects dangerous patterns."""
    assert is_dangerous_command("rm -rf /") is True
    assert is_dangerous_command("sudo rm file") is True
    assert is_dangerous_command("git push --force origin main") is True


def test_is_dangerous_command_safe():
    """is_dangerous_command allows safe commands."""
    assert is_dangerous_command("ls -la") is False
    assert is_dangerous_command("git status") is False


def test_is_dangerous_command_case_insensitive():
    """is_dangerous_command is case insensitive."""
    assert is_dangerous_command("RM -RF /") is True
    assert is_dangerous_command("Git Push --Force main") is True


def test_is_dangerous_command_custom_patterns():
    """is_dangerous_command works with custom patterns."""
    custom = ["drop table", "truncate"]
    assert is_dangerous_command("DROP TABLE users", custom) is True
    assert is_dangerous_command("select * from users", custom) is False


def test_find_matched_pattern():
    """find_matched_pattern returns the first matching pattern."""
    assert find_matched_pattern("sudo apt install") == "sudo"
    assert find_matched_pattern("ls", ["rm"]) == "dangerous pattern"
