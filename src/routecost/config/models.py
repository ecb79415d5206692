import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Cost model options ignore unknown keys: callers pass request-level option
# bags that carry settings for other components.


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1000, ge=1)


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_expansions: int | None = Field(default=None, ge=1)
    max_cost: float | None = Field(default=None, gt=0.0)
    use_heuristic: bool = True


# ----------------- COSTING ---------------------


class _CostingBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)
    not_thru_distance: float = Field(default=5000.0, ge=0.0)  # meters


class PedestrianCostingModel(_CostingBase):
    mode: Literal["pedestrian"] = "pedestrian"
    walking_speed: float = Field(default=5.1, gt=0.5, le=25.0)  # km/h
    path_preference_factor: float = Field(default=0.9, ge=0.1, le=10.0)


class BicycleCostingModel(_CostingBase):
    mode: Literal["bicycle"] = "bicycle"
    cycling_speed: float = Field(default=18.0, ge=5.0, le=60.0)  # km/h
    cycleway_factor: float = Field(default=0.8, ge=0.1, le=10.0)
    path_factor: float = Field(default=0.9, ge=0.1, le=10.0)
    road_factor: float = Field(default=1.0, ge=0.1, le=10.0)
    steps_factor: float = Field(default=8.0, ge=1.0, le=100.0)


class AutoCostingModel(_CostingBase):
    mode: Literal["auto"] = "auto"
    top_speed: float = Field(default=140.0, ge=10.0, le=252.0)  # km/h
    alley_factor: float = Field(default=1.0, ge=1.0, le=100.0)
    driveway_factor: float = Field(default=5.0, ge=1.0, le=100.0)
    service_factor: float = Field(default=1.0, ge=1.0, le=100.0)


class TruckCostingModel(AutoCostingModel):
    mode: Literal["truck"] = "truck"
    truck_speed: float = Field(default=90.0, ge=10.0, le=252.0)  # km/h
    low_class_penalty_factor: float = Field(default=1.2, ge=1.0, le=100.0)


class MotorScooterCostingModel(_CostingBase):
    mode: Literal["motor_scooter"] = "motor_scooter"
    top_speed: float = Field(default=45.0, ge=20.0, le=120.0)  # km/h
    use_primary: float = Field(default=0.5, ge=0.0, le=1.0)


class MotorcycleCostingModel(_CostingBase):
    mode: Literal["motorcycle"] = "motorcycle"
    top_speed: float = Field(default=140.0, ge=20.0, le=252.0)  # km/h
    use_highways: float = Field(default=1.0, ge=0.0, le=1.0)
    use_trails: float = Field(default=0.0, ge=0.0, le=1.0)


class TransitCostingModel(_CostingBase):
    mode: Literal["transit"] = "transit"
    walking_speed: float = Field(default=5.1, gt=0.5, le=25.0)
    max_transit_speed: float = Field(default=120.0, ge=10.0, le=400.0)
    use_bus: float = Field(default=0.3, ge=0.0, le=1.0)
    use_rail: float = Field(default=0.6, ge=0.0, le=1.0)
    walk_factor: float = Field(default=1.0, ge=0.1, le=10.0)

    @model_validator(mode="after")
    def _walk_below_transit(self):
        if self.walking_speed > self.max_transit_speed:
            raise ValueError("walking_speed must not exceed max_transit_speed")
        return self


CostingUnion = Annotated[
    PedestrianCostingModel
    | BicycleCostingModel
    | AutoCostingModel
    | TruckCostingModel
    | MotorScooterCostingModel
    | MotorcycleCostingModel
    | TransitCostingModel,
    Field(discriminator="mode"),
]

# ----------------- GRAPH ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    file: str
    fmt: Literal["pickle", "json"] = "pickle"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


# ------------------------------------------------------------------


class RouterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    run_id: str = "local"
    costing: CostingUnion = Field(default_factory=PedestrianCostingModel)
    search: SearchModel = SearchModel()
    log: LogModel = LogModel()
    graph: GraphByPath | None = None
