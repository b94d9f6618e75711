"""
An in-memory, eventually-consistent search cluster served over
``httpx.MockTransport``.

Each node exposes the HTTP API on its ``http`` endpoint and the JSON RPC
bridge on its ``admin`` endpoint. Objects are replicated to every node on
write, but a node only returns them from queries once the index has been
committed on that node.
"""

import time
from dataclasses import dataclass, field
from urllib.parse import unquote

import httpx
import orjson

from convergence.cluster import Cluster


@dataclass
class FakeNode:
    name: str
    visible: dict[str, list[dict]] = field(default_factory=dict)
    commits: int = 0


@dataclass
class FakeSearchCluster:
    cluster: Cluster
    partitions: int = 4
    down: set[str] = field(default_factory=set)
    indexes: set[str] = field(default_factory=set)
    bucket_types: dict[str, dict] = field(default_factory=dict)
    documents: dict[str, dict[str, dict]] = field(default_factory=dict)
    nodes: dict[str, FakeNode] = field(default_factory=dict)
    rpc_log: list[tuple[str, str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.nodes = {name: FakeNode(name) for name in self.cluster.nodes}
        self._http_ports = {
            self.cluster.http(name).port: name for name in self.cluster.nodes
        }
        self._admin_ports = {
            self.cluster.admin(name).port: name for name in self.cluster.nodes
        }

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        port = request.url.port
        node = self._admin_ports.get(port) or self._http_ports.get(port)
        if node is None or node in self.down:
            raise httpx.ConnectError("connection refused", request=request)

        if port in self._admin_ports and request.url.path == "/rpc":
            return self.handle_rpc(node, orjson.loads(request.content))

        return self.handle_http(node, request)

    def handle_http(self, node: str, request: httpx.Request) -> httpx.Response:
        parts = [unquote(part) for part in request.url.path.strip("/").split("/")]

        match (request.method, parts):
            case ("PUT", ["search", "index", index]):
                self.indexes.add(index)
                return httpx.Response(204)

            case ("GET", ["types", bucket_type, "props"]):
                props = self.bucket_types.get(bucket_type)
                if props is None or props["status"] != "active":
                    return httpx.Response(404)

                return httpx.Response(200, content=orjson.dumps({"props": props["props"]}))

            case ("PUT", ["types", bucket_type, "buckets", _, "keys", key]):
                index = self.bucket_types.get(bucket_type, {}).get("props", {}).get("search_index")
                if index is not None:
                    self.documents.setdefault(index, {})[key] = orjson.loads(request.content)

                return httpx.Response(204)

            case ("GET", ["search", "query", index]):
                if index not in self.indexes:
                    return httpx.Response(404)

                count = self.count(node, index, request.url.params.get("q", "*:*"))
                return httpx.Response(
                    200,
                    content=orjson.dumps({"response": {"numFound": count, "docs": []}}),
                )

        return httpx.Response(404)

    def count(self, node: str, index: str, query: str) -> int:
        name, _, term = query.partition(":")
        documents = self.nodes[node].visible.get(index, [])
        if name == "*":
            return len(documents)

        return len([doc for doc in documents if str(doc.get(name)) == term])

    def handle_rpc(self, node: str, call: dict) -> httpx.Response:
        module, function, args = call["module"], call["function"], call.get("args", [])
        self.rpc_log.append((node, module, function))

        match (module, function):
            case ("yz_solr", "ping"):
                result = "ok" if args[0] in self.indexes else False

            case ("riak_core_bucket_type", "create"):
                self.bucket_types[args[0]] = {"status": "ready", "props": args[1]}
                result = "ok"

            case ("riak_core_bucket_type", "activate"):
                self.bucket_types[args[0]]["status"] = "active"
                result = "ok"

            case ("riak_core_bucket_type", "status"):
                result = self.bucket_types.get(args[0], {}).get("status")

            case ("yz_solr", "commit"):
                index = args[0]
                self.nodes[node].visible[index] = list(self.documents.get(index, {}).values())
                self.nodes[node].commits += 1
                result = "ok"

            case ("yz_kv", "compute_exchange_info"):
                now = time.time() + 1.0
                result = [[partition, 3, now, None] for partition in range(self.partitions)]

            case ("yz_kv", "compute_tree_info"):
                result = [[partition, time.time()] for partition in range(self.partitions)]

            case ("yz_solrq", "status"):
                result = {
                    "solrq_1": {
                        "indexqs": {
                            index: {"fuse_blown": False, "queue_len": 0}
                            for index in sorted(self.indexes)
                        }
                    }
                }

            case ("yz_solrq_drain_mgr", "drain"):
                result = "ok"

            case _:
                return httpx.Response(200, content=orjson.dumps({"error": "undef"}))

        return httpx.Response(200, content=orjson.dumps({"result": result}))
