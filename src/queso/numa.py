"""NUMA topology (`-numa`).

A topology is a set of nodes plus optional distance, CPU placement and
HMAT (Heterogeneous Memory Attribute Table) entries:

    -numa node,nodeid=0,cpus=0-1,memdev=ram0
    -numa node,nodeid=1,cpus=2-3,memdev=ram1
    -numa dist,src=0,dst=1,val=20

System keeps these in insertion order and hands them to the command line.
"""

from __future__ import annotations

from enum import Enum
from typing import Self

from queso import constants
from queso.exceptions import ArityError, MutuallyExclusivePropertyError
from queso.options import Entity, Option, Usable
from queso.properties import Property


class HMATLBDataType(str, Enum):
    ACCESS_BANDWIDTH = "access-bandwidth"
    READ_BANDWIDTH = "read-bandwidth"
    WRITE_BANDWIDTH = "write-bandwidth"
    ACCESS_LATENCY = "access-latency"
    READ_LATENCY = "read-latency"
    WRITE_LATENCY = "write-latency"


class MemoryHierarchy(str, Enum):
    MEMORY = "memory"
    FIRST_LEVEL = "first-level"
    SECOND_LEVEL = "second-level"
    THIRD_LEVEL = "third-level"


class CacheAssociativity(str, Enum):
    NONE = "none"
    DIRECT = "direct"
    COMPLEX = "complex"


class CachePolicy(str, Enum):
    NONE = "none"
    WRITE_BACK = "write-back"
    WRITE_THROUGH = "write-through"


def cpu_range(*cpus: int) -> str:
    """Render a `cpus=` value: a single CPU or a first-last range.

    Raises:
        ArityError: Not exactly 1 or 2 values were given
    """
    if not 1 <= len(cpus) <= constants.NUMA_CPU_RANGE_MAX_VALUES:
        raise ArityError(
            f"NUMA cpus takes a single CPU or a first-last pair, got {len(cpus)} values",
            expected="1 or 2",
            actual=len(cpus),
        )
    return "-".join(str(cpu) for cpu in cpus)


class Node(Entity):
    """NUMA node (`-numa node,nodeid=N`)."""

    def __init__(self, node_id: int) -> None:
        super().__init__("numa", "node")
        self.node_id = node_id
        self.set_property("nodeid", node_id)

    def set_memory_size(self, size: str) -> Self:
        """Legacy fixed RAM size for the node; prefer a memory backend."""
        return self.set_property("mem", size)

    def set_memory_device(self, memdev_id: str) -> Self:
        return self.set_property("memdev", memdev_id)

    def set_cpus(self, *cpus: int) -> Self:
        return self.set_property("cpus", cpu_range(*cpus))

    def set_initiator(self, node_id: int) -> Self:
        """Node whose processors have the best access to this node's memory."""
        return self.set_property("initiator", node_id)


def distance(source: int, destination: int, value: int) -> Option:
    """SLIT distance between two nodes, e.g. `-numa dist,src=0,dst=1,val=20`."""
    return Option("numa", "dist", Property("src", source), Property("dst", destination), Property("val", value))


class CPU(Entity):
    """Assign a CPU (by topology ids) to a node."""

    def __init__(self, node_id: int) -> None:
        super().__init__("numa", "cpu")
        self.set_property("node-id", node_id)

    def set_socket_id(self, socket_id: int) -> Self:
        return self.set_property("socket-id", socket_id)

    def set_die_id(self, die_id: int) -> Self:
        return self.set_property("die-id", die_id)

    def set_cluster_id(self, cluster_id: int) -> Self:
        return self.set_property("cluster-id", cluster_id)

    def set_core_id(self, core_id: int) -> Self:
        return self.set_property("core-id", core_id)

    def set_thread_id(self, thread_id: int) -> Self:
        return self.set_property("thread-id", thread_id)


class HMATLB(Entity):
    """HMAT System Locality Latency and Bandwidth entry.

    An entry carries either a latency or a bandwidth, never both.
    """

    def __init__(
        self,
        initiator: int,
        target: int,
        hierarchy: MemoryHierarchy,
        data_type: HMATLBDataType,
    ) -> None:
        super().__init__("numa", "hmat-lb")
        self.set_property("initiator", initiator)
        self.set_property("target", target)
        self.set_property("hierarchy", hierarchy)
        self.set_property("data-type", data_type)

    def _check_exclusive(self, key: str, other: str) -> None:
        if self.has_property(other):
            raise MutuallyExclusivePropertyError(
                f"Cannot set {key} on an hmat-lb entry that already has {other}",
                key=key,
                conflicting_key=other,
            )

    def set_latency(self, nanoseconds: int) -> Self:
        self._check_exclusive("latency", "bandwidth")
        return self.set_property("latency", nanoseconds)

    def set_bandwidth(self, bandwidth: str) -> Self:
        """Bandwidth with an optional unit suffix, e.g. "200M"."""
        self._check_exclusive("bandwidth", "latency")
        return self.set_property("bandwidth", bandwidth)


class HMATCache(Entity):
    """HMAT Memory Side Cache Information entry."""

    def __init__(self, node_id: int, size: str, level: int) -> None:
        super().__init__("numa", "hmat-cache")
        self.set_property("node-id", node_id)
        self.set_property("size", size)
        self.set_property("level", level)

    def set_associativity(self, associativity: CacheAssociativity) -> Self:
        return self.set_property("associativity", associativity)

    def set_policy(self, policy: CachePolicy) -> Self:
        return self.set_property("policy", policy)

    def set_line_size(self, size: int) -> Self:
        return self.set_property("line", size)


class System:
    """Ordered collection of NUMA options making up one topology."""

    def __init__(self) -> None:
        self._items: list[Usable | Option] = []

    def add(self, *items: Usable | Option) -> Self:
        self._items.extend(items)
        return self

    def set_distance(self, source: Node, destination: Node, value: int) -> Self:
        return self.add(distance(source.node_id, destination.node_id, value))

    def nodes(self) -> list[Node]:
        return [item for item in self._items if isinstance(item, Node)]

    def options(self) -> list[Option]:
        return [item if isinstance(item, Option) else item.option() for item in self._items]
