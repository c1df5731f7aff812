"""Models validated by the example validators."""

from enum import Enum

from pydantic import BaseModel, Field


class SubModelType(str, Enum):
    ALLOWED = "allowed"
    DISALLOWED = "disallowed"


class DoubleModelType(str, Enum):
    IN = "in"
    OUT = "out"


class SubModel(BaseModel):
    id: int
    name: str | None = None
    type: SubModelType = SubModelType.ALLOWED


class DoubleModel(BaseModel):
    name: str | None = None
    type: DoubleModelType = DoubleModelType.IN


class SomeModel(BaseModel):
    """Top-level example model."""
    id: int
    name: str | None = None
    sub: SubModel
    double_left: DoubleModel = Field(alias="doubleLeft")
    double_right: DoubleModel = Field(alias="doubleRight")

    model_config = {"populate_by_name": True}


def create_sample_model() -> SomeModel:
    """Model used by `flexvalidator demo`; several rules fail on it."""
    return SomeModel(
        id=-5,
        name="didii",
        sub=SubModel(id=0, name="", type=SubModelType.ALLOWED),
        double_left=DoubleModel(name="A name", type=DoubleModelType.IN),
        double_right=DoubleModel(name="Another name", type=DoubleModelType.IN),
    )
