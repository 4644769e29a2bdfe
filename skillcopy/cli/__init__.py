"""CLI package for skillcopy."""
