"""Final response formatting node."""

from app.models.state import GraphState


def format_response_node(state: GraphState) -> dict:
    """Pick the text returned to the caller.

    Populates: final_response.

    Parameters
    ----------
    state : GraphState

    Returns
    -------
    dict
        Partial state update with ``final_response``.
    """
    response = state.get("user_response") or state.get("raw_response") or ""
    return {"final_response": response}
