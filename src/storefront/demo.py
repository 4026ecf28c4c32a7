"""Demo scenarios for live tracing walkthroughs.

A scenario is switched on with ``STOREFRONT_DEMO_SCENARIO`` (or the
``--demo`` CLI option) and injects a known problem into the purchase
flow so it can be found in the trace view:

- ``slow-checkout``: checkout validation stalls for 3 s
- ``slow-page``: the product listing stalls for 2 s
- ``error``: 30% of checkout submissions fail with an error ID
- ``experiment``: shoppers are split into control and treatment groups
"""

import random
import string
import time
from collections.abc import MutableMapping
from dataclasses import dataclass

import structlog

from chiccloset.core.observability import simulate_latency
from storefront.config import settings


log = structlog.get_logger()

EXPERIMENT_STORAGE_KEY = "otel_experiment_group"

_BASE36 = string.digits + string.ascii_uppercase


@dataclass(frozen=True)
class DemoScenario:
    """Settings of one demo scenario."""

    key: str
    name: str
    description: str
    delay_ms: int | None = None
    error_rate: float | None = None
    treatment_rate: float | None = None


DEMO_SCENARIOS: dict[str, DemoScenario] = {
    "slow-checkout": DemoScenario(
        key="slow-checkout",
        name="Scenario 1: Slow Checkout Validation",
        description="Simulates 3-second delay in checkout validation",
        delay_ms=3000,
    ),
    "slow-page": DemoScenario(
        key="slow-page",
        name="Scenario 2: Slow Page Load",
        description="Simulates slow product listing load",
        delay_ms=2000,
    ),
    "error": DemoScenario(
        key="error",
        name="Scenario 4: Payment Error",
        description="30% chance of payment processing failure",
        error_rate=0.3,
    ),
    "experiment": DemoScenario(
        key="experiment",
        name="Scenario 5: A/B Test Experiment",
        description="Splits users into control/treatment groups",
        treatment_rate=0.5,
    ),
}


def get_active_scenario(active: str | None = None) -> str | None:
    """Return ``active`` if given, else the configured scenario."""
    return active if active is not None else settings.demo_scenario


def get_demo_config(name: str | None = None) -> DemoScenario | None:
    """Look up a scenario; unknown names give None."""
    scenario = get_active_scenario(name)
    return DEMO_SCENARIOS.get(scenario) if scenario else None


def is_demo_active(name: str, active: str | None = None) -> bool:
    return get_active_scenario(active) == name


def demo_delay(ms: float, scale: float | None = None) -> None:
    """Stall for ``ms`` milliseconds, scaled like the simulated latencies."""
    simulate_latency(ms, settings.latency_scale if scale is None else scale)


def should_simulate_error(error_rate: float = 0.3, rng: random.Random | None = None) -> bool:
    return (rng or random).random() < error_rate


def generate_error_id(rng: random.Random | None = None) -> str:
    """Return an ID like ``ERR-1736000000000-4FZK2`` for support tickets."""
    source = rng or random
    suffix = "".join(source.choice(_BASE36) for _ in range(5))
    return f"ERR-{int(time.time() * 1000)}-{suffix}"


def get_experiment_group(
    storage: MutableMapping[str, str],
    rng: random.Random | None = None,
    treatment_rate: float = 0.5,
) -> str:
    """Return the shopper's A/B group, assigning one on first use.

    The assignment is kept in ``storage`` under ``otel_experiment_group``
    so the same shopper always lands in the same group.
    """
    group = storage.get(EXPERIMENT_STORAGE_KEY)
    if group is None:
        group = "treatment" if (rng or random).random() < treatment_rate else "control"
        storage[EXPERIMENT_STORAGE_KEY] = group
    return group


def log_demo_scenario(name: str | None = None) -> None:
    """Log the active scenario, if any."""
    config = get_demo_config(name)
    if config:
        log.info(
            "demo_scenario_activated",
            demo_scenario=config.key,
            demo_name=config.name,
            demo_description=config.description,
        )
