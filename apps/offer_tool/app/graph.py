# apps/offer_tool/app/graph.py

from langgraph.graph import END, StateGraph

from .nodes import (
    fetch_flights,
    fetch_hotels,
    normalize_flight_offers,
    normalize_hotel_offers,
    resolve_location,
    validate_flight_request,
    validate_hotel_request,
)
from .state import FlightSearchState, HotelSearchState


def should_continue(state) -> str:
    return "end" if state.get("failure") else "continue"


def _chain(workflow: StateGraph, steps) -> StateGraph:
    """Linear pipeline; any node that records a failure ends the run."""
    for name, node in steps:
        workflow.add_node(name, node)
    workflow.set_entry_point(steps[0][0])
    for (name, _), (next_name, _) in zip(steps, steps[1:]):
        workflow.add_conditional_edges(name, should_continue, {"continue": next_name, "end": END})
    workflow.add_edge(steps[-1][0], END)
    return workflow


flight_workflow = _chain(
    StateGraph(FlightSearchState),
    [
        ("validate", validate_flight_request),
        ("fetch_flights", fetch_flights),
        ("normalize", normalize_flight_offers),
    ],
)

hotel_workflow = _chain(
    StateGraph(HotelSearchState),
    [
        ("validate", validate_hotel_request),
        ("resolve_location", resolve_location),
        ("fetch_hotels", fetch_hotels),
        ("normalize", normalize_hotel_offers),
    ],
)

flight_graph = flight_workflow.compile()
hotel_graph = hotel_workflow.compile()
