"""Result models for the claude-dx configuration installer."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CommandsResult(BaseModel):
    copied: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class InstallResult(BaseModel):
    repo_action: Literal["cloned", "updated"]
    commands: CommandsResult = Field(default_factory=CommandsResult)
    agents: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    settings_merged: bool = False

    def summary(self) -> str:
        return ", ".join(
            [
                f"{len(self.commands.copied)} commands",
                f"{len(self.agents)} agents",
                f"{len(self.skills)} skills",
            ]
        )
