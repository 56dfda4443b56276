"""
Interaction graph for group conversations.

Two participants are connected when either replied to the other: a message
directly following theirs within a session, or an explicit Discord reply.
"""

from itertools import combinations
from typing import Any, Dict, Optional

from . import config
from .helpers import safe_divide


def compute_network(state) -> Optional[Dict[str, Any]]:
    names = state.names
    n = len(names)
    if n < config.NETWORK_MIN_PARTICIPANTS:
        return None

    edges = []
    degree = {name: 0 for name in names}
    for source, target in combinations(names, 2):
        forward = state.interactions.get((source, target), 0)
        backward = state.interactions.get((target, source), 0)
        if forward + backward == 0:
            continue
        edges.append({
            "source": source,
            "target": target,
            "weight": forward + backward,
            "source_to_target": forward,
            "target_to_source": backward,
        })
        degree[source] += 1
        degree[target] += 1

    nodes = [
        {
            "name": name,
            "total_messages": state.persons[name].total_messages,
            "centrality": round(degree[name] / (n - 1), 3),
        }
        for name in names
    ]
    most_connected = max(nodes, key=lambda node: node["centrality"])["name"]

    return {
        "nodes": nodes,
        "edges": edges,
        "density": round(safe_divide(len(edges), n * (n - 1) / 2), 3),
        "most_connected": most_connected,
    }
