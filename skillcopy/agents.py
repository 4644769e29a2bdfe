"""Agent specifications.

Each supported agent (Claude Code, Cursor, Codex, ...) keeps its skills in
its own directory inside a project and under the user's home directory.
This module is the single table describing those locations.
"""

from dataclasses import dataclass
from pathlib import Path

from skillcopy.exceptions import UnknownAgentError


@dataclass(frozen=True)
class AgentSpec:
    """Specification for an agent integration.

    Attributes:
        name: Identifier used on the command line and in results (e.g., "claude-code")
        display_name: Human-readable agent name (e.g., "Claude Code")
        skills_dir: Project-relative skills directory (e.g., ".claude/skills")
        global_skills_dir: Skills directory in the user's home (e.g., "~/.claude/skills")
    """

    name: str
    display_name: str
    skills_dir: str
    global_skills_dir: str

    def get_skills_dir(self, project_root: Path) -> Path:
        """Get the skills directory for this agent in a project."""
        return project_root / self.skills_dir

    def get_global_skills_dir(self) -> Path:
        """Get the global skills directory (in user home)."""
        return Path(self.global_skills_dir).expanduser()


AGENTS: dict[str, AgentSpec] = {
    spec.name: spec
    for spec in (
        AgentSpec("claude-code", "Claude Code", ".claude/skills", "~/.claude/skills"),
        AgentSpec("cursor", "Cursor", ".cursor/skills", "~/.cursor/skills"),
        AgentSpec("codex", "Codex", ".codex/skills", "~/.codex/skills"),
        AgentSpec("opencode", "OpenCode", ".opencode/skill", "~/.config/opencode/skill"),
        AgentSpec("github-copilot", "GitHub Copilot", ".github/skills", "~/.copilot/skills"),
        AgentSpec("windsurf", "Windsurf", ".windsurf/skills", "~/.codeium/windsurf/skills"),
        AgentSpec("gemini-cli", "Gemini CLI", ".gemini/skills", "~/.gemini/skills"),
        AgentSpec("goose", "Goose", ".goose/skills", "~/.config/goose/skills"),
        AgentSpec("amp", "Amp", ".agents/skills", "~/.config/agents/skills"),
    )
}


def get_agent(name: str) -> AgentSpec:
    """Get an agent spec by identifier.

    Raises:
        UnknownAgentError: If no agent is registered under the name
    """
    try:
        return AGENTS[name]
    except KeyError:
        available = ", ".join(AGENTS)
        raise UnknownAgentError(f"Unknown agent '{name}'. Available: {available}") from None


def agent_display_names(agent_names: list[str]) -> str:
    """Render a comma separated list of display names, falling back to the raw id."""
    return ", ".join(
        AGENTS[name].display_name if name in AGENTS else name for name in agent_names
    )
