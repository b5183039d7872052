"""Applying Chaos Mesh network chaos resources to a cluster."""

from __future__ import annotations

import requests

from exprunner.chaosobject import (
    CHAOS_MESH_GROUP,
    CHAOS_MESH_NETWORK_CHAOS_RESOURCE_PLURAL,
    CHAOS_MESH_VERSION,
    NetworkChaosArgs,
    construct_network_chaos,
)
from exprunner.crd import NetworkChaos
from exprunner.domain import Deployment, ExperimentConfig
from exprunner.manifest import write_kubernetes_manifest
from exprunner.ports import ChaosExperimentsPort
from exprunner.utility import format_duration, get_timestamped_name


class ChaosMeshError(RuntimeError):
    """A chaos resource could not be applied."""


class ChaosMeshClient:
    """Creates Chaos Mesh custom resources through the Kubernetes API server."""

    def __init__(
        self,
        api_server: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_server = api_server.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _collection_url(self, namespace: str) -> str:
        return (
            f"{self.api_server}/apis/{CHAOS_MESH_GROUP}/{CHAOS_MESH_VERSION}"
            f"/namespaces/{namespace}/{CHAOS_MESH_NETWORK_CHAOS_RESOURCE_PLURAL}"
        )

    def apply_network_delay(self, network_delay: NetworkChaos) -> None:
        """Create the network delay chaos in its namespace."""
        url = self._collection_url(network_delay.namespace)
        try:
            response = self.session.post(
                url, json=network_delay.to_dict(), timeout=self.timeout
            )
        except requests.RequestException as err:
            raise ChaosMeshError(
                f"could not apply the network delay chaos experiment: {err}"
            ) from err
        if not 200 <= response.status_code < 300:
            raise ChaosMeshError(
                "could not apply the network delay chaos experiment: "
                f"status {response.status_code}: {response.text}"
            )


class ChaosMeshAdapter(ChaosExperimentsPort):
    """Network delay injection backed by Chaos Mesh."""

    def __init__(self, client: ChaosMeshClient | None = None) -> None:
        self.client = client

    def create_and_apply_network_delay(
        self, deployment: Deployment, config: ExperimentConfig
    ) -> None:
        """Inject delay into the deployment's pods; in a dry run write the manifest."""
        rca = config.rca_config
        network_delay = construct_network_chaos(
            NetworkChaosArgs(
                name=get_timestamped_name(f"{config.experiment_name}-{deployment.name}"),
                target_namespace=deployment.namespace,
                experiment_namespace=config.experiment_namespace,
                selector={"app": deployment.name},
                duration=format_duration(rca.injection_duration),
                latency=format_duration(rca.latency),
                jitter=format_duration(rca.jitter),
            )
        )
        if config.dry_run:
            write_kubernetes_manifest(
                network_delay, f"{deployment.name}-network-chaos.yaml"
            )
            return
        if self.client is None:
            raise ChaosMeshError("no chaos mesh client configured")
        self.client.apply_network_delay(network_delay)