"""
Graph construction for the note pipeline.

A linear StateGraph: organize -> paint_units -> finalize. Collaborators and
the unit list travel in ``config["configurable"]["run"]``.
"""

from langgraph.graph import END, START, StateGraph

from workflows.notedraw.nodes import finalize, organize_content, paint_units
from workflows.notedraw.state import NoteDrawState


def create_notedraw_graph():
    """Create the note pipeline graph.

    Flow:
        START -> organize -> paint_units -> finalize -> END
    """
    builder = StateGraph(NoteDrawState)

    builder.add_node("organize", organize_content)
    builder.add_node("paint_units", paint_units)
    builder.add_node("finalize", finalize)

    builder.add_edge(START, "organize")
    builder.add_edge("organize", "paint_units")
    builder.add_edge("paint_units", "finalize")
    builder.add_edge("finalize", END)

    return builder.compile()


notedraw_graph = create_notedraw_graph()
