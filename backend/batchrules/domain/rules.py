"""Rule models: stage definitions, quantity rules and per-domain rulesets.

All models are frozen so a ruleset loaded at startup can be shared by any
number of concurrent callers.
"""
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


class StageDefinition(BaseModel):
    """One stage of a domain's lifecycle and the rules for leaving it."""

    model_config = ConfigDict(frozen=True)

    stage: str
    label: str = ""
    description: str = ""
    allowed_next_stages: tuple[str, ...] = ()
    allowed_previous_stages: tuple[str, ...] = ()  # informational, not used by the transition check
    min_duration_days: int | None = None
    max_duration_days: int | None = None  # advisory only
    required_fields: tuple[str, ...] = ()
    validation_message: str = ""
    entry_checks: tuple[str, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return not self.allowed_next_stages


class QuantityRule(BaseModel):
    """Minimum (and optional maximum) weight for one batch operation."""

    model_config = ConfigDict(frozen=True)

    min_weight: float
    max_weight: float | None = None
    unit: str = "grams"
    context: str = ""


class CycleWindow(BaseModel):
    """Typical start-to-harvest span in days. Outside the window only warns."""

    model_config = ConfigDict(frozen=True)

    short_days: int
    long_days: int
    short_message: str
    long_message: str


class DomainRuleset(BaseModel):
    """Everything the validators need to know about one domain."""

    model_config = ConfigDict(frozen=True)

    stages: tuple[StageDefinition, ...]
    quantity_rules: Mapping[str, QuantityRule] = Field(default_factory=dict, validate_default=True)
    harvest_cycle: CycleWindow

    @field_validator("quantity_rules", mode="after")
    @classmethod
    def freeze_quantity_rules(cls, value: Mapping[str, QuantityRule]) -> Mapping[str, QuantityRule]:
        # frozen=True only guards attribute assignment, not the mapping itself
        return MappingProxyType(dict(value))

    @field_serializer("quantity_rules", mode="wrap")
    def dump_quantity_rules(self, value, handler):
        return handler(dict(value))

    @model_validator(mode="after")
    def check_stage_graph(self) -> "DomainRuleset":
        ids = [definition.stage for definition in self.stages]
        duplicates = sorted({stage for stage in ids if ids.count(stage) > 1})
        if duplicates:
            raise ValueError(f"Duplicate stage ids: {', '.join(duplicates)}")

        known = set(ids)
        for definition in self.stages:
            unknown = [s for s in definition.allowed_next_stages if s not in known]
            if unknown:
                raise ValueError(
                    f"Stage '{definition.stage}' points to unknown stages: {', '.join(unknown)}"
                )
        return self

    def stage(self, stage_id: str) -> StageDefinition | None:
        for definition in self.stages:
            if definition.stage == stage_id:
                return definition
        return None
