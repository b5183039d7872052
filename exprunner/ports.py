"""Interfaces the experiment services drive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta

from exprunner.domain import Deployment, ExperimentConfig


class KubernetesClientPort(ABC):
    """Interactions with the Kubernetes API."""

    @abstractmethod
    def get_deployments_without_annotation(
        self, config: ExperimentConfig
    ) -> list[Deployment]:
        """Deployments of the target namespace not marked to be ignored."""

    @abstractmethod
    def create_metrics_processor_job(
        self,
        config: ExperimentConfig,
        name: str,
        bucket_dir: str,
        duration: timedelta,
    ) -> None:
        """Create and start a job that processes the metrics of a period."""

    @abstractmethod
    def create_load_generator_deployment(self, config: ExperimentConfig) -> None:
        """Create the deployment of the load generator pod."""

    @abstractmethod
    def delete_load_generator_deployment(self, config: ExperimentConfig) -> None:
        """Delete the deployment of the load generator pod."""


class ChaosExperimentsPort(ABC):
    """Interactions with a chaos experiment tool."""

    @abstractmethod
    def create_and_apply_network_delay(
        self, deployment: Deployment, config: ExperimentConfig
    ) -> None:
        """Create a network delay chaos for the deployment and apply it."""