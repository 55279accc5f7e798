"""Compiled-in rulesets for the cannabis and produce domains.

Stage durations are measured from the batch start date. Minimums block a
transition, maximums only warn.
"""
import json
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import structlog
from pydantic import TypeAdapter, ValidationError

from batchrules.core.exceptions import RulesetLoadError
from batchrules.domain.domains import Domain, coerce_domain
from batchrules.domain.rules import CycleWindow, DomainRuleset, QuantityRule, StageDefinition

logger = structlog.get_logger(__name__)


CANNABIS_STAGES: tuple[StageDefinition, ...] = (
    StageDefinition(
        stage="propagation",
        label="Propagation",
        description="Cloning or seedling phase",
        allowed_next_stages=("vegetative",),
        min_duration_days=7,
        required_fields=("plant_count",),
        validation_message="Clones must root for minimum 7 days before vegetative stage",
    ),
    StageDefinition(
        stage="vegetative",
        label="Vegetative",
        description="Vegetative growth phase",
        allowed_next_stages=("flowering",),
        allowed_previous_stages=("propagation",),
        min_duration_days=14,
        required_fields=("lighting_schedule",),
        validation_message="Minimum 14 days vegetative growth required",
    ),
    StageDefinition(
        stage="flowering",
        label="Flowering",
        description="Flowering/bloom phase",
        allowed_next_stages=("harvest",),
        allowed_previous_stages=("vegetative",),
        min_duration_days=49,
        max_duration_days=90,
        validation_message="Typical flowering period is 7-12 weeks",
        entry_checks=(
            "Verify lighting changed to 12/12 for flowering",
            "Ensure plants are sexually mature",
        ),
    ),
    StageDefinition(
        stage="harvest",
        label="Harvest",
        description="Harvesting plants",
        allowed_next_stages=("drying",),
        allowed_previous_stages=("flowering",),
        required_fields=("harvest_date",),
        validation_message="Harvest date must be recorded",
        entry_checks=(
            "Verify trichome development (cloudy/amber ratio)",
            "Check for any pest or disease issues",
        ),
    ),
    StageDefinition(
        stage="drying",
        label="Drying",
        description="Drying harvested material",
        allowed_next_stages=("curing", "testing"),
        allowed_previous_stages=("harvest",),
        min_duration_days=7,
        max_duration_days=21,
        validation_message="Drying typically takes 7-14 days",
        entry_checks=(
            "Record wet weight",
            "Ensure proper drying conditions (60-65°F, 55-62% RH)",
        ),
    ),
    StageDefinition(
        stage="curing",
        label="Curing",
        description="Curing for quality",
        allowed_next_stages=("testing", "packaging"),
        allowed_previous_stages=("drying",),
        min_duration_days=14,
        validation_message="Minimum 14 days curing required for quality",
        entry_checks=(
            "Verify dry weight recorded",
            "Check moisture content (10-12%)",
            "Ensure curing jars/containers prepared",
        ),
    ),
    StageDefinition(
        stage="testing",
        label="Testing",
        description="Lab testing and quality assurance",
        allowed_next_stages=("packaging", "closed"),
        allowed_previous_stages=("drying", "curing"),
        required_fields=("test_results",),
        validation_message="Test results must be recorded before packaging",
    ),
    StageDefinition(
        stage="packaging",
        label="Packaging",
        description="Final packaging for distribution",
        allowed_next_stages=("closed",),
        allowed_previous_stages=("testing", "curing"),
        required_fields=("metrc_package_tag",),
        validation_message="METRC package tag required",
        entry_checks=(
            "Obtain lab test results (THC/CBD/microbial)",
            "Verify compliance with jurisdiction requirements",
        ),
    ),
    StageDefinition(
        stage="closed",
        label="Closed",
        description="Batch completed",
        allowed_previous_stages=("packaging", "testing"),
        entry_checks=(
            "Final quality assessment complete",
            "All packaging and labeling complete",
        ),
    ),
)

PRODUCE_STAGES: tuple[StageDefinition, ...] = (
    StageDefinition(
        stage="seeding",
        label="Seeding",
        description="Seeds planted",
        allowed_next_stages=("germination",),
        min_duration_days=1,
        required_fields=("seed_lot_number",),
        validation_message="Record seed lot number before germination",
    ),
    StageDefinition(
        stage="germination",
        label="Germination",
        description="Seeds germinating",
        allowed_next_stages=("seedling", "growing"),
        allowed_previous_stages=("seeding",),
        min_duration_days=2,
        max_duration_days=14,
        validation_message="Germination typically takes 2-7 days",
    ),
    StageDefinition(
        stage="seedling",
        label="Seedling",
        description="Young plants establishing",
        allowed_next_stages=("transplant", "growing"),
        allowed_previous_stages=("germination",),
    ),
    StageDefinition(
        stage="transplant",
        label="Transplant",
        description="Plants being transplanted",
        allowed_next_stages=("growing",),
        allowed_previous_stages=("seedling",),
    ),
    StageDefinition(
        stage="growing",
        label="Growing",
        description="Active growth phase",
        allowed_next_stages=("pre_harvest", "harvest"),
        allowed_previous_stages=("germination", "seedling", "transplant"),
        min_duration_days=21,
        validation_message="Minimum growing period varies by crop type",
    ),
    StageDefinition(
        stage="pre_harvest",
        label="Pre-Harvest",
        description="Preparing for harvest",
        allowed_next_stages=("harvest",),
        allowed_previous_stages=("growing",),
        entry_checks=(
            "Verify ripeness/maturity indicators",
            "Check for optimal harvest window",
        ),
    ),
    StageDefinition(
        stage="harvest",
        label="Harvest",
        description="Harvesting produce",
        allowed_next_stages=("washing", "sorting", "grading", "storage"),
        allowed_previous_stages=("growing", "pre_harvest"),
        required_fields=("harvest_date",),
        validation_message="Move to grading or storage within 2 hours of harvest",
        entry_checks=(
            "Record harvest date and time",
            "Note weather conditions",
        ),
    ),
    StageDefinition(
        stage="washing",
        label="Washing",
        description="Cleaning harvested produce",
        allowed_next_stages=("sorting", "grading"),
        allowed_previous_stages=("harvest",),
        entry_checks=(
            "Ensure food safety protocols followed",
            "Check water quality",
        ),
    ),
    StageDefinition(
        stage="sorting",
        label="Sorting",
        description="Sorting by size/quality",
        allowed_next_stages=("grading", "packaging"),
        allowed_previous_stages=("harvest", "washing"),
    ),
    StageDefinition(
        stage="grading",
        label="Grading",
        description="Quality grading",
        allowed_next_stages=("ripening", "packaging", "storage"),
        allowed_previous_stages=("harvest", "washing", "sorting", "storage"),
        required_fields=("grade_assignment",),
        validation_message="Grade assignment required",
        entry_checks=(
            "Perform visual quality inspection",
            "Measure size/weight standards",
        ),
    ),
    StageDefinition(
        stage="ripening",
        label="Ripening",
        description="Controlled ripening",
        allowed_next_stages=("packaging", "storage"),
        allowed_previous_stages=("grading",),
        min_duration_days=1,
        max_duration_days=14,
        validation_message="Ripening duration varies by produce type",
    ),
    StageDefinition(
        stage="packaging",
        label="Packaging",
        description="Final packaging",
        allowed_next_stages=("storage", "closed"),
        allowed_previous_stages=("sorting", "grading", "ripening", "storage"),
        required_fields=("lot_number", "packaging_date"),
        validation_message="Lot number and packaging date required for traceability",
        entry_checks=(
            "Verify packaging materials food-safe",
            "Label with required information",
        ),
    ),
    StageDefinition(
        stage="storage",
        label="Storage",
        description="Cold storage",
        allowed_next_stages=("grading", "packaging", "closed"),
        allowed_previous_stages=("harvest", "grading", "ripening", "packaging"),
        max_duration_days=30,
        validation_message="Monitor shelf life - typical storage is 7-30 days",
        entry_checks=(
            "Set proper storage temperature",
            "Monitor humidity levels",
        ),
    ),
    StageDefinition(
        stage="closed",
        label="Closed",
        description="Batch completed",
        allowed_previous_stages=("testing", "packaging", "storage"),
        entry_checks=("Final quality check complete",),
    ),
)

CANNABIS_QUANTITY_RULES: dict[str, QuantityRule] = {
    "split": QuantityRule(
        min_weight=0.1,
        context="METRC requires minimum 0.1g tracking precision",
    ),
    "waste": QuantityRule(
        min_weight=0.1,
        context="All cannabis waste must be tracked per METRC",
    ),
    "transfer": QuantityRule(
        min_weight=0.1,
        context="Transfer packages must meet METRC minimum weight",
    ),
    "merge": QuantityRule(
        min_weight=0.1,
        max_weight=50_000,  # 50kg typical package limit
        context="METRC package weight limits",
    ),
}

PRODUCE_QUANTITY_RULES: dict[str, QuantityRule] = {
    "split": QuantityRule(
        min_weight=5,
        context="Minimum split quantity for traceability",
    ),
    "waste": QuantityRule(
        min_weight=5,
        context="Food safety requires waste documentation for losses >5g",
    ),
    "transfer": QuantityRule(
        min_weight=5,
        context="Minimum transfer quantity for efficiency",
    ),
    "merge": QuantityRule(
        min_weight=5,
        max_weight=907_185,  # 1 ton (2000 lbs) in grams
        context="Practical handling and storage limits",
    ),
}

CANNABIS_RULESET = DomainRuleset(
    stages=CANNABIS_STAGES,
    quantity_rules=CANNABIS_QUANTITY_RULES,
    harvest_cycle=CycleWindow(
        short_days=60,
        long_days=180,
        short_message="Cannabis harvest in less than 60 days is unusually fast",
        long_message="Cannabis cycle exceeding 180 days is unusually long",
    ),
)

PRODUCE_RULESET = DomainRuleset(
    stages=PRODUCE_STAGES,
    quantity_rules=PRODUCE_QUANTITY_RULES,
    harvest_cycle=CycleWindow(
        short_days=21,
        long_days=120,
        short_message="Produce harvest in less than 21 days may indicate early harvest",
        long_message="Produce cycle exceeding 120 days is longer than typical",
    ),
)

Rulesets = Mapping[Domain, DomainRuleset]

RULESETS: Rulesets = MappingProxyType({
    Domain.CANNABIS: CANNABIS_RULESET,
    Domain.PRODUCE: PRODUCE_RULESET,
})

_rulesets_adapter = TypeAdapter(dict[Domain, DomainRuleset])


def get_ruleset(domain: Domain | str, rulesets: Rulesets | None = None) -> DomainRuleset | None:
    """Look up the ruleset for a domain tag. Unknown domains return None."""
    resolved = coerce_domain(domain)
    if resolved is None:
        return None
    return (rulesets if rulesets is not None else RULESETS).get(resolved)


def load_rulesets(path: str | Path) -> Rulesets:
    """Load rulesets from a JSON file, falling back to built-ins for omitted domains.

    Raises:
        RulesetLoadError: file missing, unreadable, or not a valid ruleset document
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RulesetLoadError(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise RulesetLoadError(str(path), f"not UTF-8 text: {e.reason}") from e

    try:
        loaded = _rulesets_adapter.validate_python(json.loads(raw))
    except json.JSONDecodeError as e:
        raise RulesetLoadError(str(path), f"invalid JSON: {e.msg}") from e
    except ValidationError as e:
        raise RulesetLoadError(str(path), f"{e.error_count()} validation error(s)") from e

    logger.info(
        "rulesets_loaded",
        path=str(path),
        domains=sorted(domain.value for domain in loaded),
    )
    return MappingProxyType({**RULESETS, **loaded})
