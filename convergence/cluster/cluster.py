from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .endpoint import Endpoint

Node = str


@dataclass(slots=True, frozen=True)
class NodeInterfaces:
    http: Endpoint
    admin: Endpoint | None = None
    solr_http: Endpoint | None = None

    @property
    def admin_endpoint(self) -> Endpoint:
        return self.admin if self.admin is not None else self.http

    @classmethod
    def from_dict(cls, data: dict) -> "NodeInterfaces":
        http = data.get("http")
        if http is None:
            raise ValueError("Node interfaces require an 'http' endpoint")

        admin = data.get("admin")
        solr_http = data.get("solr_http")
        return cls(
            http=Endpoint.parse(http),
            admin=Endpoint.parse(admin) if admin is not None else None,
            solr_http=Endpoint.parse(solr_http) if solr_http is not None else None,
        )


@dataclass(slots=True)
class Cluster:
    """
    A fixed, ordered set of nodes and the endpoints each one exposes.

    Membership does not change for the lifetime of the object: joins and
    leaves happen outside the harness and produce a new ``Cluster``.
    """

    nodes: tuple[Node, ...]
    interfaces: dict[Node, NodeInterfaces] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.nodes = tuple(self.nodes)
        if not self.nodes:
            raise ValueError("Cluster requires at least one node")

        if len(set(self.nodes)) != len(self.nodes):
            raise ValueError(f"Cluster contains duplicate nodes: {list(self.nodes)}")

        missing = [node for node in self.nodes if node not in self.interfaces]
        if missing:
            raise ValueError(f"Missing interfaces for nodes: {missing}")

    def __iter__(self):
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self.nodes

    def connection_info(
        self,
        nodes: Sequence[Node] | None = None,
    ) -> dict[Node, NodeInterfaces]:
        if nodes is None:
            nodes = self.nodes

        return {node: self.interfaces_for(node) for node in nodes}

    def interfaces_for(self, node: Node) -> NodeInterfaces:
        interfaces = self.interfaces.get(node)
        if interfaces is None:
            raise KeyError(f"Unknown node '{node}'")

        return interfaces

    def http(self, node: Node) -> Endpoint:
        return self.interfaces_for(node).http

    def admin(self, node: Node) -> Endpoint:
        return self.interfaces_for(node).admin_endpoint

    def solr_http(self, node: Node) -> Endpoint:
        solr_http = self.interfaces_for(node).solr_http
        if solr_http is None:
            raise KeyError(f"Node '{node}' exposes no internal search endpoint")

        return solr_http

    def host_entries(self) -> list[Endpoint]:
        return [self.http(node) for node in self.nodes]

    def host_port(self) -> Endpoint:
        return self.http(self.nodes[0])

    def subset(self, nodes: Sequence[Node]) -> "Cluster":
        return Cluster(
            nodes=tuple(nodes),
            interfaces={node: self.interfaces_for(node) for node in nodes},
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Cluster":
        nodes_data = data.get("nodes")
        if not isinstance(nodes_data, list) or not nodes_data:
            raise ValueError("Cluster requires a non-empty 'nodes' list")

        nodes: list[Node] = []
        interfaces: dict[Node, NodeInterfaces] = {}
        for node_data in nodes_data:
            name = node_data.get("name")
            if not name:
                raise ValueError("Cluster node requires 'name'")

            nodes.append(name)
            interfaces[name] = NodeInterfaces.from_dict(node_data)

        return cls(nodes=tuple(nodes), interfaces=interfaces)


Target = Node | Sequence[Node] | Cluster


def resolve_nodes(target: Target) -> list[Node]:
    """Resolve a single node, a list of nodes, or a cluster to an ordered node list."""
    if isinstance(target, Cluster):
        return list(target.nodes)

    if isinstance(target, str):
        return [target]

    nodes = list(target)
    if len(set(nodes)) != len(nodes):
        raise ValueError(f"Duplicate nodes in target: {nodes}")

    return nodes
