from typing import List, Optional

from .keys import service_identifier_name
from .planning import Plan, Request


def _node_id(request: Request) -> str:
    return f"r_{request.guid[:12]}"


def _node_label(request: Request, name: str) -> str:
    parts = [name]
    if len(request.bindings) == 1:
        binding = request.bindings[0]
        impl = getattr(binding.implementation_type, "__name__", None)
        parts.append(f"[{binding.type.value}{' ' + impl if impl else ''}]")
    else:
        parts.append(f"[{len(request.bindings)}]")
    return "\\n".join(parts)


def plan_to_dot(plan: Plan, *, rankdir: str = "TB", title: Optional[str] = None) -> str:
    context = plan.parent_context
    fmt = context.kernel.get_service_identifier_as_string if context is not None else service_identifier_name

    lines: List[str] = []
    lines.append("digraph Plan {")
    lines.append(f'  rankdir="{rankdir}";')
    lines.append("  node [shape=box, fontsize=10];")
    if title:
        lines.append('  labelloc="t";')
        lines.append(f'  label="{title}";')

    for request in plan.requests():
        label = _node_label(request, fmt(request.service_identifier)).replace('"', '\\"')
        lines.append(f'  {_node_id(request)} [label="{label}"];')

    for request in plan.requests():
        pid = _node_id(request)
        for child in request.child_requests:
            lines.append(f"  {pid} -> {_node_id(child)};")

    lines.append("}")
    return "\n".join(lines)


def export_plan(
    plan: Plan,
    path: str,
    *,
    rankdir: str = "TB",
    title: Optional[str] = None,
) -> None:
    if plan is None:
        raise RuntimeError("No plan given; cannot export request graph.")

    with open(path, "w", encoding="utf-8") as f:
        f.write(plan_to_dot(plan, rankdir=rankdir, title=title))
