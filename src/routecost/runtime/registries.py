# runtime/registries.py
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from routecost.app.protocols import CostModel
from routecost.config.models import (
    AutoCostingModel,
    BicycleCostingModel,
    MotorcycleCostingModel,
    MotorScooterCostingModel,
    PedestrianCostingModel,
    TransitCostingModel,
    TruckCostingModel,
)
from routecost.domain.costing.costing_auto import AutoCost, TruckCost
from routecost.domain.costing.costing_bicycle import BicycleCost
from routecost.domain.costing.costing_motor import MotorcycleCost, MotorScooterCost
from routecost.domain.costing.costing_pedestrian import PedestrianCost
from routecost.domain.costing.costing_transit import TransitCost
from routecost.domain.errors import ConfigurationError

CostingFactory = Callable[[Any], CostModel]

_costing_registry: dict[str, tuple[type[BaseModel], CostingFactory]] = {}


# ------------------- Cost model registry ---------------------------


def register_costing(mode: str, options_model: type[BaseModel]):
    def deco(fn: CostingFactory):
        _costing_registry[mode] = (options_model, fn)
        return fn

    return deco


def available_modes() -> tuple[str, ...]:
    return tuple(sorted(_costing_registry))


def costing_options(mode: str, options: Mapping | BaseModel | None = None) -> BaseModel:
    """Validate an option mapping against the mode's model (unknown keys are dropped)."""
    try:
        options_model, _ = _costing_registry[mode]
    except KeyError:
        raise ConfigurationError(
            f"Unknown costing mode {mode!r}; expected one of {available_modes()}", mode=mode
        ) from None
    if type(options) is options_model:
        return options
    if isinstance(options, BaseModel):
        options = options.model_dump()
    payload = {**(options or {}), "mode": mode}
    try:
        return options_model.model_validate(payload)
    except ValidationError as exc:
        fields = {".".join(str(p) for p in err["loc"]): err["msg"] for err in exc.errors()}
        raise ConfigurationError(
            f"Invalid {mode} costing options: {fields}", mode=mode, fields=fields
        ) from exc


def make_costing(mode: str, options: Mapping | BaseModel | None = None) -> CostModel:
    opts = costing_options(mode, options)
    _, factory = _costing_registry[mode]
    return factory(opts)


@register_costing("pedestrian", PedestrianCostingModel)
def _make_pedestrian(cfg: PedestrianCostingModel):
    return PedestrianCost(cfg)


@register_costing("bicycle", BicycleCostingModel)
def _make_bicycle(cfg: BicycleCostingModel):
    return BicycleCost(cfg)


@register_costing("auto", AutoCostingModel)
def _make_auto(cfg: AutoCostingModel):
    return AutoCost(cfg)


@register_costing("truck", TruckCostingModel)
def _make_truck(cfg: TruckCostingModel):
    return TruckCost(cfg)


@register_costing("motor_scooter", MotorScooterCostingModel)
def _make_motor_scooter(cfg: MotorScooterCostingModel):
    return MotorScooterCost(cfg)


@register_costing("motorcycle", MotorcycleCostingModel)
def _make_motorcycle(cfg: MotorcycleCostingModel):
    return MotorcycleCost(cfg)


@register_costing("transit", TransitCostingModel)
def _make_transit(cfg: TransitCostingModel):
    return TransitCost(cfg)
