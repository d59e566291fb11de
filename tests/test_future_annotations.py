from __future__ import annotations

from typing import Annotated

from kernel_ioc import Binding, Kernel, inject, injectable, named
from kernel_ioc.constraints import TargetNamed
from kernel_ioc.metadata import declared_dependencies


class Engine:
    pass


@injectable
class V8(Engine):
    pass


@injectable
class Electric(Engine):
    pass


@injectable
class Car:
    def __init__(self, engine: Annotated[Engine, named("fast")], plate: Annotated[str, inject("plate")]):
        self.engine = engine
        self.plate = plate


def test_string_annotations_are_resolved():
    deps = declared_dependencies(Car)

    assert deps[0].service_identifier is Engine
    assert deps[0].name == "fast"
    assert deps[1].service_identifier == "plate"


def test_planning_with_postponed_annotations():
    kernel = Kernel()
    kernel.add_binding(Binding.to(Engine, V8, constraint=TargetNamed("fast")))
    kernel.add_binding(Binding.to(Engine, Electric, constraint=TargetNamed("quiet")))
    kernel.add_binding(Binding.to_constant("plate", "KX-42"))
    kernel.add_binding(Binding.to(Car, Car))

    root = kernel.plan(Car).plan.root_request

    assert root.child_requests[0].bindings[0].implementation_type is V8
    assert root.child_requests[1].service_identifier == "plate"


@injectable
class Garage:
    def __init__(self, engine: Annotated[Engine, named("fast")], driver: Driver, spares: list[Engine]):
        self.engine = engine
        self.driver = driver
        self.spares = spares


class Driver:
    pass


def test_forward_reference_keeps_other_parameters_resolved():
    engine, driver, spares = declared_dependencies(Garage)

    assert engine.service_identifier is Engine
    assert engine.name == "fast"
    assert driver.service_identifier == "Driver"
    assert spares.service_identifier is Engine
    assert spares.multi


def test_planning_next_to_an_unresolved_forward_reference():
    kernel = Kernel()
    kernel.add_binding(Binding.to(Engine, V8, constraint=TargetNamed("fast")))
    kernel.add_binding(Binding.to(Engine, Electric, constraint=TargetNamed("quiet")))
    kernel.add_binding(Binding.to_constant("Driver", Driver()))
    kernel.add_binding(Binding.to(Garage, Garage))

    engine, driver, spares = kernel.plan(Garage).plan.root_request.child_requests

    assert engine.bindings[0].implementation_type is V8
    assert driver.service_identifier == "Driver"
    assert [r.bindings[0].implementation_type for r in spares.child_requests] == [V8, Electric]
