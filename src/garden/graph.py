"""Link graph over resolved wikilinks.

Uses :mod:`networkx` so callers can run any graph algorithm on the vault;
backlinks and orphan detection are provided here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

import networkx as nx

if TYPE_CHECKING:
    from garden.document import Document
    from garden.slugs import SlugIndex


def build_link_graph(documents: Iterable["Document"], index: "SlugIndex") -> nx.DiGraph:
    """Return a directed graph with one node per note and one edge per valid link.

    Links whose resolved target is not a note in *documents* are left out;
    :func:`garden.validate.validate_links` reports those.
    """
    docs = list(documents)
    G: nx.DiGraph = nx.DiGraph()
    for doc in docs:
        G.add_node(doc.identity, title=doc.title)
    for doc in docs:
        for token in doc.links:
            target = index.resolve(token)
            if target in G and target != doc.identity:
                G.add_edge(doc.identity, target)
    return G


def backlinks(graph: nx.DiGraph, identity: str) -> list[str]:
    """Identities of notes linking to *identity*, sorted."""
    if identity not in graph:
        return []
    return sorted(graph.predecessors(identity))


def orphans(graph: nx.DiGraph) -> list[str]:
    """Notes with neither inbound nor outbound links, sorted."""
    return sorted(node for node in graph.nodes if graph.degree(node) == 0)
