"""Input domain models and semantic validation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class JobSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    arrival: int = Field(ge=0)
    duration: int = Field(ge=0)
    deadline: int
    periodicity: int = Field(default=0, ge=0)


class ServerSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    performance: float = Field(gt=0)
    frequencies: list[int] = Field(min_length=1)

    @field_validator("frequencies")
    @classmethod
    def validate_frequencies(cls, value: list[int]) -> list[int]:
        if any(frequency <= 0 for frequency in value):
            raise ValueError("frequencies must be > 0")
        return value


class InputSpec(BaseModel):
    """Key/value settings of one simulation input file."""

    model_config = ConfigDict(extra="ignore")

    power_cap: float = Field(gt=0)
    energy_cap: float = Field(default=0, ge=0)
    repeat: int = Field(default=0, ge=0)
    job_file: str
    server_file: str
    dependency_file: Optional[str] = None


class DatacenterConfig(BaseModel):
    """Engine configuration, passed explicitly at construction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    power_cap: float = Field(gt=0)
    energy_cap: float = Field(default=0, ge=0)
    repeat: int = Field(default=0, ge=0)
    silent: bool = False


class PlatformSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    servers: list[ServerSpec] = Field(min_length=1)
    jobs: list[JobSpec] = Field(default_factory=list)
    dependencies: list[tuple[int, int]] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_platform(self) -> "PlatformSpec":
        server_ids = [server.id for server in self.servers]
        if len(server_ids) != len(set(server_ids)):
            raise ValueError("duplicate server id")
        return self
