"""Reading comparison settings from YAML configuration files"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from mutcomp.errors import InputDataError, InvalidParameterError
from mutcomp.priors import PRIOR_POLICIES, ExternalReferencePrior, PooledEmpiricalPrior

# Keys shared by all analyses when given at the top level of the file
SHARED_KEYS = ["simulation_size", "random_seed"]


@dataclass
class ComparisonConfig:
    simulation_size: int
    group_pairs: List[Tuple[str, str]]
    prior: Union[PooledEmpiricalPrior, ExternalReferencePrior] = field(default_factory=PooledEmpiricalPrior)
    random_seed: int = 0
    # Groups to sample; all columns of the count table when None
    groups: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> "ComparisonConfig":
        simulation_size = settings.get("simulation_size")
        if isinstance(simulation_size, bool) or not isinstance(simulation_size, int) or simulation_size <= 0:
            raise InvalidParameterError(
                f"simulation_size must be a positive integer, got {simulation_size!r}"
            )

        random_seed = settings.get("random_seed", 0)
        if isinstance(random_seed, bool) or not isinstance(random_seed, int) or random_seed < 0:
            raise InvalidParameterError(
                f"random_seed must be a non-negative integer, got {random_seed!r}"
            )

        groups = settings.get("groups")
        if groups is not None:
            groups = [str(g) for g in groups]

        return cls(
            simulation_size=simulation_size,
            group_pairs=parse_pairs(settings.get("group_pairs", [])),
            prior=parse_prior(settings),
            random_seed=random_seed,
            groups=groups,
        )


def parse_pairs(raw_pairs) -> List[Tuple[str, str]]:
    if not isinstance(raw_pairs, (list, tuple)):
        raise InvalidParameterError(f"group_pairs must be a list, got {raw_pairs!r}")

    pairs = []
    for pair in raw_pairs:
        if isinstance(pair, str) or not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise InvalidParameterError(f"group pair must be [group_a, group_b], got {pair!r}")
        pairs.append((str(pair[0]), str(pair[1])))

    return pairs


def _positive(settings, key):
    value = settings.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise InvalidParameterError(f"{key} must be a positive number, got {value!r}")
    return float(value)


def parse_prior(settings: Dict[str, Any]):
    policy = settings.get("prior_policy", PooledEmpiricalPrior.name)
    if policy not in PRIOR_POLICIES:
        raise InvalidParameterError(
            f"unknown prior_policy {policy!r}, expected one of {sorted(PRIOR_POLICIES)}"
        )

    if policy == PooledEmpiricalPrior.name:
        prior_groups = settings.get("prior_groups")
        if prior_groups is not None:
            prior_groups = [str(g) for g in prior_groups]
        return PooledEmpiricalPrior(groups=prior_groups)

    reference_group = settings.get("external_prior_reference_group")
    if not reference_group:
        raise InvalidParameterError(
            "external_prior_reference_group is required for the external-reference-weighted prior"
        )
    return ExternalReferencePrior(
        reference_group=str(reference_group),
        total_weight=_positive(settings, "external_prior_total_weight"),
        flat_concentration=_positive(settings, "external_prior_flat_concentration"),
    )


def load_config(config_path: str) -> Dict[str, Any]:
    if not os.path.isfile(config_path):
        raise InputDataError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InputDataError(f"Cannot parse configuration file {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise InputDataError(f"Configuration file {config_path} must hold a mapping")

    return config


def analyses_from_config(config: Dict[str, Any]) -> Dict[str, ComparisonConfig]:
    """
    Named comparisons of a configuration.

    A file either describes a single comparison at its top level, or several
    under `analyses:`, which inherit the top-level `simulation_size` and
    `random_seed` unless they set their own.
    """
    if "analyses" not in config:
        return {"comparison": ComparisonConfig.from_dict(config)}

    analyses = config["analyses"]
    if not isinstance(analyses, dict) or len(analyses) == 0:
        raise InvalidParameterError("analyses must be a non-empty mapping of named comparisons")

    shared = {key: config[key] for key in SHARED_KEYS if key in config}

    return {
        str(name): ComparisonConfig.from_dict({**shared, **(settings or {})})
        for name, settings in analyses.items()
    }
