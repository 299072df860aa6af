"""LangSmith tracing for pipeline entry points.

The public operations (generate, regenerate) open one root trace each; the
LangGraph run started inside is attached to it as a child through the
callbacks returned by ``merge_trace_config``. Tracing is inert when
LANGSMITH_TRACING is off (see core.config.configure_langsmith).
"""

from typing import Any, Callable, TypeVar

from langsmith import get_current_run_tree, traceable

F = TypeVar("F", bound=Callable[..., Any])


def workflow_traceable(name: str, workflow_type: str) -> Callable[[F], F]:
    """Root-trace decorator tagged ``workflow:<workflow_type>``.

    Usage:
        @workflow_traceable(name="NoteDrawGenerate", workflow_type="notedraw")
        async def generate(self, request, sink=None): ...
    """
    return traceable(
        run_type="chain",
        name=name,
        tags=[f"workflow:{workflow_type}"],
        metadata={"workflow_type": workflow_type},
    )


def get_trace_config() -> dict[str, Any]:
    """Callbacks linking a graph invocation to the active trace, if any."""
    run_tree = get_current_run_tree()
    if run_tree is None:
        return {}
    return {"callbacks": run_tree.get_child_callbacks()}


def merge_trace_config(existing_config: dict[str, Any] | None) -> dict[str, Any]:
    """Add trace callbacks to a graph config without dropping its own.

    Args:
        existing_config: Graph config (``configurable`` etc.) or None

    Returns:
        A new dict; ``existing_config`` is not modified
    """
    trace_config = get_trace_config()
    merged = dict(existing_config or {})
    if "callbacks" not in trace_config:
        return merged

    current = merged.get("callbacks")
    if not current:
        merged["callbacks"] = trace_config["callbacks"]
    elif isinstance(current, list):
        merged["callbacks"] = current + trace_config["callbacks"]
    else:
        merged["callbacks"] = [current] + trace_config["callbacks"]
    return merged


def add_trace_metadata(metadata: dict[str, Any]) -> None:
    """Attach request metadata (mode, style, language, provider) to the active trace."""
    run_tree = get_current_run_tree()
    if run_tree is not None:
        run_tree.add_metadata(metadata)
