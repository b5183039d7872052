"""Building Chaos Mesh network delay resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from exprunner.crd import (
    DelaySpec,
    Direction,
    NetworkChaos,
    NetworkChaosAction,
    NetworkChaosSpec,
    PodSelector,
    PodSelectorSpec,
    SelectorMode,
    TcParameter,
)

CHAOS_MESH_GROUP = "chaos-mesh.org"
CHAOS_MESH_VERSION = "v1alpha1"
CHAOS_MESH_NETWORK_CHAOS_RESOURCE = "NetworkChaos"
CHAOS_MESH_NETWORK_CHAOS_RESOURCE_PLURAL = "networkchaos"


@dataclass
class NetworkChaosArgs:
    """What a network delay chaos is built from."""

    name: str
    target_namespace: str
    experiment_namespace: str
    selector: dict[str, str] = field(default_factory=dict)
    duration: str = ""
    latency: str = ""
    jitter: str = ""


def construct_network_chaos(args: NetworkChaosArgs) -> NetworkChaos:
    """A NetworkChaos resource living in the experiment namespace."""
    return NetworkChaos(
        kind=CHAOS_MESH_NETWORK_CHAOS_RESOURCE,
        api_version=f"{CHAOS_MESH_GROUP}/{CHAOS_MESH_VERSION}",
        name=args.name,
        namespace=args.experiment_namespace,
        spec=construct_network_chaos_spec(args),
    )


def construct_network_chaos_spec(args: NetworkChaosArgs) -> NetworkChaosSpec:
    """A two-way delay from the selected pods to every pod of the target namespace."""
    return NetworkChaosSpec(
        pod_selector=PodSelector(
            selector=PodSelectorSpec(
                namespaces=[args.target_namespace],
                label_selectors=dict(args.selector),
            ),
            mode=SelectorMode.ALL,
        ),
        duration=args.duration,
        action=NetworkChaosAction.DELAY,
        direction=Direction.BOTH,
        tc_parameter=TcParameter(
            delay=DelaySpec(latency=args.latency, jitter=args.jitter)
        ),
        target=PodSelector(
            selector=PodSelectorSpec(namespaces=[args.target_namespace]),
            mode=SelectorMode.ALL,
        ),
    )