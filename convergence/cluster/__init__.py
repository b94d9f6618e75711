from .cluster import (
    Cluster as Cluster,
    Node as Node,
    NodeInterfaces as NodeInterfaces,
    Target as Target,
    resolve_nodes as resolve_nodes,
)
from .endpoint import Endpoint as Endpoint
