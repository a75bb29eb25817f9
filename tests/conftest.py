"""Shared pytest fixtures for fieldwise tests."""

import dataclasses
import typing

import pydantic
import pytest

from fieldwise import AccessorCache, MappingLocalizer, Range, Required, constraint


class Car(pydantic.BaseModel):
    """Test model with a declarative range constraint on ``id``."""

    id: typing.Annotated[
        int, constraint(Range, 1, 10, error_message="Value must be between 1 and 10")
    ] = 0
    name: str = ""
    email: str | None = None


class FrozenCar(pydantic.BaseModel):
    """Test model whose members cannot be written."""

    model_config = pydantic.ConfigDict(frozen=True)

    id: int = 0
    name: str = ""


@dataclasses.dataclass
class Truck:
    """Test dataclass with instance constraints."""

    id: typing.Annotated[int, Range(2, 20)] = 0
    name: typing.Annotated[str, Required(), "not a constraint"] = ""
    plate: str | None = None


@dataclasses.dataclass(frozen=True)
class FrozenTruck:
    """Test frozen dataclass."""

    id: int = 0


class Sample:
    """Test plain class with an annotated attribute and properties."""

    code: str
    tags: typing.ClassVar[list[str]] = []
    _secret: str

    def __init__(self, code: str = "", label: str = "", size: int = 0) -> None:
        self.code = code
        self._label = label
        self._size = size

    @property
    def label(self) -> str:
        return self._label

    @property
    def size(self) -> int:
        return self._size

    @size.setter
    def size(self, value: int) -> None:
        self._size = value


class BrokenConstraints:
    """Test class carrying constraints that fail to build."""

    code: typing.Annotated[
        str,
        constraint(Range, 20, 2),
        constraint(Required, allow_empty_strings=True),
        constraint(Required, no_such_option=True),
        Required(),
    ]

    def __init__(self, code: str = "") -> None:
        self.code = code


@pytest.fixture
def accessors() -> AccessorCache:
    """Fixture providing an accessor cache isolated from the shared one."""
    return AccessorCache()


@pytest.fixture
def localizer() -> MappingLocalizer:
    """Fixture providing a localizer with a few message keys."""
    return MappingLocalizer(
        {
            "Validation.Number.Range": "{0} is out of range ({1}-{2})",
            "Validation.Email.BadFormat": "Correo invalido.",
            "Validation.Required.NotNull": "Campo requerido.",
            "Custom.Greeting": "Hola {0}",
        }
    )


@pytest.fixture
def car_model() -> type[Car]:
    """Fixture providing the Car Pydantic model."""
    return Car


@pytest.fixture
def frozen_car_model() -> type[FrozenCar]:
    """Fixture providing the frozen Car Pydantic model."""
    return FrozenCar


@pytest.fixture
def truck_model() -> type[Truck]:
    """Fixture providing the Truck dataclass."""
    return Truck


@pytest.fixture
def frozen_truck_model() -> type[FrozenTruck]:
    """Fixture providing the frozen Truck dataclass."""
    return FrozenTruck


@pytest.fixture
def sample_model() -> type[Sample]:
    """Fixture providing the plain Sample class."""
    return Sample


@pytest.fixture
def broken_model() -> type[BrokenConstraints]:
    """Fixture providing a class whose constraints partly fail to build."""
    return BrokenConstraints
