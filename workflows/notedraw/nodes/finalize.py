"""Finalize node."""

from datetime import datetime
from typing import Any

from langchain_core.runnables import RunnableConfig

from ..progress import StageChanged
from ..runtime import get_run
from ..state import NoteDrawState


async def finalize(state: NoteDrawState, config: RunnableConfig) -> dict[str, Any]:
    get_run(config).emit(StageChanged("done", "All visual notes generated!"))
    return {"completed_at": datetime.utcnow(), "current_phase": "done"}
