"""
Profile schemas: normalized replace-payload entries and the seed document.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ProfileFields(BaseModel):
    name: str = ""
    email: str = ""
    education: str = ""
    links: dict[str, Any] = Field(default_factory=dict)


class SkillEntry(BaseModel):
    name: str = Field(..., min_length=1)
    score: int = 1


class WorkEntry(BaseModel):
    company: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class ProjectEntry(BaseModel):
    title: str = ""
    description: str = ""
    skills: list[Any] = Field(default_factory=list)
    links: dict[str, Any] = Field(default_factory=dict)


class ProfileReplacement(BaseModel):
    """
    A replace payload after normalization.

    `None` for a collection means "key omitted": that table is left as is.
    An empty list means "replace with nothing".
    """

    profile: ProfileFields
    skills: list[SkillEntry] | None = None
    work: list[WorkEntry] | None = None
    projects: list[ProjectEntry] | None = None


# --- seed document ---


class SeedProfile(BaseModel):
    name: str = ""
    email: str = ""
    education: str = ""
    links: dict[str, Any] = Field(default_factory=dict)


class SeedSkill(BaseModel):
    name: str = Field(..., min_length=1)
    # null/missing means 1; an explicit 0 is kept.
    score: int | None = None


class SeedWork(BaseModel):
    company: str | None = None
    role: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    description: str | None = None


class SeedProject(BaseModel):
    title: str = ""
    description: str | None = None
    skills: list[str] | None = None
    links: dict[str, Any] | None = None


class SeedDocument(BaseModel):
    profile: SeedProfile
    skills: list[SeedSkill]
    work: list[SeedWork]
    projects: list[SeedProject]
