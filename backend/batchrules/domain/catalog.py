"""Stage catalog lookups.

Pure functions over the read-only rulesets. Unknown domains or stages are a
normal outcome (empty tuple, None or False), never an exception.
"""
from batchrules.domain.domains import Domain
from batchrules.domain.rules import StageDefinition
from batchrules.domain.rulesets import Rulesets, get_ruleset


def get_stages(domain: Domain | str, rulesets: Rulesets | None = None) -> tuple[StageDefinition, ...]:
    """Ordered stage definitions for a domain (empty for unknown domains)."""
    ruleset = get_ruleset(domain, rulesets)
    if ruleset is None:
        return ()
    return ruleset.stages


def get_stage(
    domain: Domain | str,
    stage: str,
    rulesets: Rulesets | None = None,
) -> StageDefinition | None:
    ruleset = get_ruleset(domain, rulesets)
    if ruleset is None:
        return None
    return ruleset.stage(stage)


def is_valid_transition(
    domain: Domain | str,
    from_stage: str,
    to_stage: str,
    rulesets: Rulesets | None = None,
) -> bool:
    """True iff ``to_stage`` is a successor of ``from_stage`` in the domain's catalog."""
    definition = get_stage(domain, from_stage, rulesets)
    if definition is None:
        return False
    return to_stage in definition.allowed_next_stages


def get_next_stages(
    domain: Domain | str,
    stage: str,
    rulesets: Rulesets | None = None,
) -> tuple[StageDefinition, ...]:
    """Successor definitions of a stage, in catalog order."""
    definition = get_stage(domain, stage, rulesets)
    if definition is None:
        return ()
    return tuple(
        candidate
        for candidate in get_stages(domain, rulesets)
        if candidate.stage in definition.allowed_next_stages
    )


def get_all_stages(domain: Domain | str, rulesets: Rulesets | None = None) -> tuple[str, ...]:
    return tuple(definition.stage for definition in get_stages(domain, rulesets))


def is_domain_stage(domain: Domain | str, stage: str, rulesets: Rulesets | None = None) -> bool:
    return get_stage(domain, stage, rulesets) is not None


def get_initial_stage(domain: Domain | str, rulesets: Rulesets | None = None) -> StageDefinition | None:
    stages = get_stages(domain, rulesets)
    return stages[0] if stages else None


def is_terminal_stage(domain: Domain | str, stage: str, rulesets: Rulesets | None = None) -> bool:
    definition = get_stage(domain, stage, rulesets)
    return definition is not None and definition.is_terminal


def get_entry_checks(domain: Domain | str, stage: str, rulesets: Rulesets | None = None) -> tuple[str, ...]:
    """Operator checklist for entering a stage. Advisory only."""
    definition = get_stage(domain, stage, rulesets)
    if definition is None:
        return ()
    return definition.entry_checks
