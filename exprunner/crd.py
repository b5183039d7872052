"""Chaos Mesh NetworkChaos custom resource types and their wire form."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NetworkChaosAction(str, Enum):
    """The network chaos action to perform."""

    NETEM = "netem"
    DELAY = "delay"
    LOSS = "loss"
    DUPLICATE = "duplicate"
    CORRUPT = "corrupt"
    PARTITION = "partition"
    BANDWIDTH = "bandwidth"


class Direction(str, Enum):
    """Traffic direction between source and target."""

    TO = "to"
    FROM = "from"
    BOTH = "both"


class SelectorMode(str, Enum):
    """How many of the selected objects the chaos action runs on."""

    ONE = "one"
    ALL = "all"
    FIXED = "fixed"
    FIXED_PERCENT = "fixed-percent"
    RANDOM_MAX_PERCENT = "random-max-percent"


def _wire(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _put_nonempty(document: dict[str, Any], key: str, value: Any) -> None:
    """Store ``value`` unless it is empty, as omitempty fields are."""
    if value:
        document[key] = value


@dataclass
class LabelSelectorRequirement:
    """A set-based label selector expression."""

    key: str
    operator: str
    values: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the requirement."""
        document: dict[str, Any] = {"key": self.key, "operator": self.operator}
        _put_nonempty(document, "values", list(self.values))
        return document


@dataclass
class GenericSelectorSpec:
    """Selectors that pick objects by namespace, field, label or annotation."""

    namespaces: list[str] = field(default_factory=list)
    field_selectors: dict[str, str] = field(default_factory=dict)
    label_selectors: dict[str, str] = field(default_factory=dict)
    expression_selectors: list[LabelSelectorRequirement] = field(default_factory=list)
    annotation_selectors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """The wire form; empty selectors are left out."""
        document: dict[str, Any] = {}
        _put_nonempty(document, "namespaces", list(self.namespaces))
        _put_nonempty(document, "fieldSelectors", dict(self.field_selectors))
        _put_nonempty(document, "labelSelectors", dict(self.label_selectors))
        _put_nonempty(
            document,
            "expressionSelectors",
            [requirement.to_dict() for requirement in self.expression_selectors],
        )
        _put_nonempty(document, "annotationSelectors", dict(self.annotation_selectors))
        return document


@dataclass
class PodSelectorSpec(GenericSelectorSpec):
    """Pod selectors; when all are empty every pod is selected."""

    nodes: list[str] = field(default_factory=list)
    pods: dict[str, list[str]] = field(default_factory=dict)
    node_selectors: dict[str, str] = field(default_factory=dict)
    pod_phase_selectors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """The wire form, generic selectors inlined."""
        document = super().to_dict()
        _put_nonempty(document, "nodes", list(self.nodes))
        _put_nonempty(
            document, "pods", {ns: list(names) for ns, names in self.pods.items()}
        )
        _put_nonempty(document, "nodeSelectors", dict(self.node_selectors))
        _put_nonempty(document, "podPhaseSelectors", list(self.pod_phase_selectors))
        return document


@dataclass
class PodSelector:
    """Selects the pods a chaos action is injected into."""

    selector: PodSelectorSpec
    mode: SelectorMode
    value: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the selector."""
        document: dict[str, Any] = {
            "selector": self.selector.to_dict(),
            "mode": _wire(self.mode),
        }
        _put_nonempty(document, "value", self.value)
        return document


@dataclass
class ReorderSpec:
    """Packet reordering details."""

    reorder: str
    gap: int
    correlation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the reorder spec."""
        document: dict[str, Any] = {"reorder": self.reorder}
        _put_nonempty(document, "correlation", self.correlation)
        document["gap"] = self.gap
        return document


@dataclass
class DelaySpec:
    """Details of a delay action."""

    latency: str
    correlation: str = ""
    jitter: str = ""
    reorder: ReorderSpec | None = None

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the delay spec."""
        document: dict[str, Any] = {"latency": self.latency}
        _put_nonempty(document, "correlation", self.correlation)
        _put_nonempty(document, "jitter", self.jitter)
        if self.reorder is not None:
            document["reorder"] = self.reorder.to_dict()
        return document


@dataclass
class LossSpec:
    """Details of a loss action."""

    loss: str
    correlation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the loss spec."""
        document: dict[str, Any] = {"loss": self.loss}
        _put_nonempty(document, "correlation", self.correlation)
        return document


@dataclass
class DuplicateSpec:
    """Details of a duplicate action."""

    duplicate: str
    correlation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the duplicate spec."""
        document: dict[str, Any] = {"duplicate": self.duplicate}
        _put_nonempty(document, "correlation", self.correlation)
        return document


@dataclass
class CorruptSpec:
    """Details of a corrupt action."""

    corrupt: str
    correlation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the corrupt spec."""
        document: dict[str, Any] = {"corrupt": self.corrupt}
        _put_nonempty(document, "correlation", self.correlation)
        return document


@dataclass
class BandwidthSpec:
    """Details of a bandwidth limit."""

    rate: str
    limit: int
    buffer: int
    peakrate: int | None = None
    minburst: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """The wire form; unset optional sizes are left out."""
        document: dict[str, Any] = {
            "rate": self.rate,
            "limit": self.limit,
            "buffer": self.buffer,
        }
        if self.peakrate is not None:
            document["peakrate"] = self.peakrate
        if self.minburst is not None:
            document["minburst"] = self.minburst
        return document


@dataclass
class TcParameter:
    """Traffic control parameters of a network chaos."""

    delay: DelaySpec | None = None
    loss: LossSpec | None = None
    duplicate: DuplicateSpec | None = None
    corrupt: CorruptSpec | None = None
    bandwidth: BandwidthSpec | None = None

    def to_dict(self) -> dict[str, Any]:
        """The wire form; only the parameters that are set appear."""
        parts = {
            "delay": self.delay,
            "loss": self.loss,
            "duplicate": self.duplicate,
            "corrupt": self.corrupt,
            "bandwidth": self.bandwidth,
        }
        return {key: part.to_dict() for key, part in parts.items() if part is not None}


@dataclass
class NetworkChaosSpec:
    """Desired state of a NetworkChaos."""

    pod_selector: PodSelector
    action: NetworkChaosAction
    device: str = ""
    duration: str | None = None
    tc_parameter: TcParameter = field(default_factory=TcParameter)
    direction: Direction | None = None
    target: PodSelector | None = None
    target_device: str = ""
    external_targets: list[str] = field(default_factory=list)
    remote_cluster: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The wire form, pod selector and traffic control parameters inlined."""
        document = self.pod_selector.to_dict()
        document["action"] = _wire(self.action)
        _put_nonempty(document, "device", self.device)
        if self.duration is not None:
            document["duration"] = self.duration
        document.update(self.tc_parameter.to_dict())
        if self.direction is not None:
            _put_nonempty(document, "direction", _wire(self.direction))
        if self.target is not None:
            document["target"] = self.target.to_dict()
        _put_nonempty(document, "targetDevice", self.target_device)
        _put_nonempty(document, "externalTargets", list(self.external_targets))
        _put_nonempty(document, "remoteCluster", self.remote_cluster)
        return document


@dataclass
class NetworkChaos:
    """A NetworkChaos custom resource."""

    spec: NetworkChaosSpec
    name: str = ""
    namespace: str = ""
    kind: str = ""
    api_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The resource as the API server expects it."""
        document: dict[str, Any] = {}
        _put_nonempty(document, "kind", self.kind)
        _put_nonempty(document, "apiVersion", self.api_version)
        metadata: dict[str, Any] = {}
        _put_nonempty(metadata, "name", self.name)
        _put_nonempty(metadata, "namespace", self.namespace)
        document["metadata"] = metadata
        document["spec"] = self.spec.to_dict()
        return document