from __future__ import annotations

import json
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from jsonschema import ValidationError, validate

from landcost.config import settings

from .context import CostPolicy

D = Decimal

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "cost_policy.schema.json"


class PolicyError(ValueError):
    """Policy file missing, unreadable or failing validation."""


def _dec(value: Any, name: str) -> D:
    try:
        return D(str(value))
    except (InvalidOperation, ValueError) as e:
        raise PolicyError(f"{name} is not a decimal: {value!r}") from e


def policy_from_dict(d: Dict[str, Any]) -> CostPolicy:
    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        validate(instance=d, schema=schema)
    except ValidationError as e:
        raise PolicyError(f"invalid cost policy: {e.message}") from e

    shipping = d["shipping"]
    currencies = d.get("currencies") or {}
    status = d.get("deliveryStatus") or {}

    kg_per_cbm = _dec(shipping["kgPerCbm"], "kgPerCbm")
    if kg_per_cbm <= 0:
        raise PolicyError("kgPerCbm must be > 0")

    defaults = CostPolicy()
    return CostPolicy(
        express_surcharge_multiplier=_dec(
            shipping["expressSurchargeMultiplier"], "expressSurchargeMultiplier"
        ),
        express_fallback_multiplier=_dec(
            shipping["expressFallbackMultiplier"], "expressFallbackMultiplier"
        ),
        kg_per_cbm=kg_per_cbm,
        source_currency=currencies.get("source", defaults.source_currency),
        local_currency=currencies.get("local", defaults.local_currency),
        delivered_status=status.get("delivered", defaults.delivered_status),
        cancelled_status=status.get("cancelled", defaults.cancelled_status),
    )


def load_cost_policy(path: str | Path) -> CostPolicy:
    policy_path = Path(path)
    try:
        with policy_path.open("r", encoding="utf-8") as f:
            d = yaml.safe_load(f)
    except OSError as e:
        raise PolicyError(f"cannot read cost policy {policy_path}: {e}") from e

    if not isinstance(d, dict):
        raise PolicyError(f"cost policy {policy_path} must be a mapping")
    return policy_from_dict(d)


@lru_cache(maxsize=1)
def get_cost_policy(path: Optional[str] = None) -> CostPolicy:
    """Configured policy, with settings overrides applied. Cached."""
    policy = load_cost_policy(path or settings.costing_policy_path)
    if settings.express_surcharge_multiplier is not None:
        policy = replace(
            policy,
            express_surcharge_multiplier=D(str(settings.express_surcharge_multiplier)),
        )
    return policy
