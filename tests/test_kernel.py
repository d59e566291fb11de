import logging
from typing import Annotated

import pytest

from kernel_ioc import (
    AmbiguousMatchError,
    Binding,
    BindingScope,
    Kernel,
    KernelOptions,
    KeyNotFoundError,
    NotRegisteredError,
    Planner,
    Token,
    injectable,
    named,
)
from kernel_ioc.constraints import TargetNamed, TargetTagged


class Weapon:
    pass


@injectable
class Katana(Weapon):
    pass


@injectable
class Shuriken(Weapon):
    pass


@injectable
class Ninja:
    def __init__(self, weapon: Annotated[Weapon, named("strong")]):
        self.weapon = weapon


class RecordingPlanner(Planner):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.filtered = []

    def filter_bindings(self, context, parent_request, target, bindings):
        active = super().filter_bindings(context, parent_request, target, bindings)
        self.filtered.append((parent_request, target.service_identifier, len(bindings), len(active)))
        return active


def _weapons(kernel: Kernel) -> None:
    kernel.add_binding(Binding.to(Weapon, Katana, constraint=TargetNamed("strong")))
    kernel.add_binding(Binding.to(Weapon, Shuriken, constraint=TargetTagged("canThrow", True)))


def test_plan_returns_owning_context():
    kernel = Kernel()
    binding = kernel.add_binding(Binding.to(Katana, Katana))

    context = kernel.plan(Katana)

    assert context.kernel is kernel
    assert context.plan.parent_context is context
    assert context.plan.root_request.bindings == [binding]


def test_plan_named_and_tagged_pick_matching_binding():
    kernel = Kernel()
    _weapons(kernel)

    named = kernel.plan_named(Weapon, "strong").plan.root_request
    tagged = kernel.plan_tagged(Weapon, "canThrow", True).plan.root_request

    assert named.bindings[0].implementation_type is Katana
    assert named.target.matches_named_tag("strong")
    assert tagged.bindings[0].implementation_type is Shuriken


def test_plain_plan_of_constrained_bindings_is_not_registered():
    kernel = Kernel()
    _weapons(kernel)

    with pytest.raises(NotRegisteredError):
        kernel.plan(Weapon)


def test_plan_of_unconstrained_duplicates_is_ambiguous():
    kernel = Kernel()
    kernel.add_binding(Binding.to(Weapon, Katana))
    kernel.add_binding(Binding.to(Weapon, Shuriken))

    with pytest.raises(AmbiguousMatchError, match="Weapon"):
        kernel.plan(Weapon)


def test_plan_all_plans_every_binding():
    kernel = Kernel()
    _weapons(kernel)

    contexts = kernel.plan_all(Weapon)

    impls = [c.plan.root_request.bindings[0].implementation_type for c in contexts]
    assert impls == [Katana, Shuriken]
    assert all(c.plan.root_request.target.is_array() for c in contexts)


def test_root_and_nested_selection_share_one_constraint_filter():
    planner = RecordingPlanner()
    kernel = Kernel(planner=planner)
    _weapons(kernel)
    kernel.add_binding(Binding.to(Ninja, Ninja))

    root = kernel.plan(Ninja).plan.root_request

    assert root.child_requests[0].bindings[0].implementation_type is Katana
    (root_parent, root_id, _, _), (nested_parent, nested_id, total, kept) = planner.filtered
    assert root_parent is None and root_id is Ninja
    assert nested_parent is not None and nested_id is Weapon
    assert (total, kept) == (2, 1)


def test_child_kernel_sees_parent_bindings_and_options():
    parent = Kernel(options=KernelOptions(max_depth=10))
    parent.add_binding(Binding.to(Katana, Katana))
    child = parent.create_child()

    assert child.parent is parent
    assert child.options.max_depth == 10
    assert child.is_bound(Katana)
    assert not parent.is_bound("nope")
    assert child.plan(Katana).plan.root_request.bindings[0].implementation_type is Katana


def test_binding_helper_applies_default_scope():
    kernel = Kernel(options=KernelOptions(default_scope=BindingScope.SINGLETON))

    singleton = kernel.binding(Katana, implementation_type=Katana)
    transient = kernel.binding(Shuriken, implementation_type=Shuriken, scope=BindingScope.TRANSIENT)

    assert singleton.scope is BindingScope.SINGLETON
    assert transient.scope is BindingScope.TRANSIENT
    assert kernel.registry.get(Katana) == [singleton]


def test_unbind_and_unbind_all():
    kernel = Kernel()
    kernel.add_binding(Binding.to(Katana, Katana))
    kernel.add_binding(Binding.to(Shuriken, Shuriken))

    kernel.unbind(Katana)
    assert not kernel.is_bound(Katana)
    with pytest.raises(KeyNotFoundError):
        kernel.unbind(Katana)

    kernel.unbind_all()
    assert not kernel.is_bound(Shuriken)


def test_unload_removes_module_bindings(kernel_logs):
    kernel = Kernel()
    kernel.add_binding(Binding.to(Katana, Katana, module_id="weapons"))
    kernel.add_binding(Binding.to(Shuriken, Shuriken, module_id="throwables"))

    kernel.unload("weapons")

    assert not kernel.is_bound(Katana)
    assert kernel.is_bound(Shuriken)
    assert any("Unloaded module(s): weapons" in line for line in kernel_logs)


def test_service_identifier_display_names():
    kernel = Kernel()

    assert kernel.get_service_identifier_as_string("Weapon") == "Weapon"
    assert kernel.get_service_identifier_as_string(Katana) == "Katana"
    assert kernel.get_service_identifier_as_string(Token("db")) == "Token(db)"
    assert kernel.get_service_identifier_as_string(len) == "len"


def test_token_identifiers_do_not_collide():
    kernel = Kernel()
    first, second = Token("db"), Token("db")
    kernel.add_binding(Binding.to_constant(first, "primary"))

    assert kernel.is_bound(first)
    assert not kernel.is_bound(second)
    with pytest.raises(NotRegisteredError, match=r"Token\(db\)"):
        kernel.plan(second)


def test_info_prefixes_kernel_guid(caplog):
    kernel = Kernel()
    with caplog.at_level(logging.INFO, logger="kernel_ioc"):
        kernel.info("hello")
    assert f"[{kernel.guid[:8]}] hello" in caplog.text
