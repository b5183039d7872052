"""Experiment runners: load tests and root-cause-analysis experiments."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import timedelta

from exprunner.domain import ExperimentConfig
from exprunner.ports import ChaosExperimentsPort, KubernetesClientPort
from exprunner.utility import format_duration, get_s3_key, get_timestamped_name

logger = logging.getLogger(__name__)

DRY_DURATION = timedelta(minutes=1)
_STARTUP_WAIT = timedelta(minutes=1)
_DRAIN_WAIT = timedelta(minutes=1)

Sleeper = Callable[[float], None]


def _pause(config: ExperimentConfig, sleep: Sleeper, duration: timedelta) -> None:
    if not config.dry_run:
        sleep(duration.total_seconds())


class LoadTestRunner:
    """Runs the load generator once per configured arrival rate."""

    def __init__(
        self,
        kubernetes_client: KubernetesClientPort,
        config: ExperimentConfig,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self.kubernetes_client = kubernetes_client
        self.config = config
        self.sleep = sleep

    def run(self) -> None:
        """Generate load at each arrival rate, then start its metrics processor."""
        config = self.config
        lg = config.load_generator_config
        for rps in config.arrival_rates.split(","):
            lg.total_arrival_rate = rps
            config.update_names_with_arrival_rate()

            self.kubernetes_client.create_load_generator_deployment(config)
            logger.info("Started loadgenerator arrival-rate=%s", lg.total_arrival_rate)

            logger.info(
                "[Experiement Started]: sleeping for dry duration duration=%s",
                format_duration(DRY_DURATION),
            )
            _pause(config, self.sleep, DRY_DURATION)

            duration = config.parsed_duration()
            logger.info(
                "[Experiement Started]: sleeping for load test duration duration=%s",
                format_duration(duration),
            )
            _pause(config, self.sleep, duration)

            logger.info("Duration complete. deleting loadgenerator deployment")
            self.kubernetes_client.delete_load_generator_deployment(config)

            self.kubernetes_client.create_metrics_processor_job(
                config,
                get_timestamped_name(f"{config.experiment_name}-{config.k6_test_name}"),
                get_s3_key(config.metrics_processor_config.s3_bucket_dir, config.k6_test_name),
                config.parsed_duration(),
            )
            logger.info("Started metrics processor arrival-rate=%s", lg.total_arrival_rate)
        logger.info("[Experiement Ended]")


class RCAExperimentRunner:
    """Injects network delay into each deployment in turn under constant load."""

    def __init__(
        self,
        config: ExperimentConfig,
        kubernetes_client: KubernetesClientPort,
        chaos_experiment: ChaosExperimentsPort,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self.config = config
        self.kubernetes_client = kubernetes_client
        self.chaos_experiment = chaos_experiment
        self.sleep = sleep

    def run(self) -> None:
        """Run the normal period, then one injection cycle per deployment."""
        config = self.config
        rca = config.rca_config
        lg = config.load_generator_config

        lg.total_arrival_rate = config.arrival_rates.split(",")[0]
        config.duration = format_duration(rca.total_duration() * 2)
        config.update_names_with_arrival_rate()
        self.kubernetes_client.create_load_generator_deployment(config)
        logger.info(
            "Started loadgenerator. waiting 1 minute for start up. arrival-rate=%s",
            lg.total_arrival_rate,
        )
        _pause(config, self.sleep, _STARTUP_WAIT)

        logger.info(
            "[Normal Period Start]: Sleeping. duration=%s",
            format_duration(rca.normal_duration),
        )
        _pause(config, self.sleep, rca.normal_duration)

        self.kubernetes_client.create_metrics_processor_job(
            config,
            get_timestamped_name(f"{config.experiment_name}-normal"),
            get_s3_key(config.metrics_processor_config.s3_bucket_dir, "normal"),
            rca.normal_duration,
        )
        logger.info("[Normal Period End]: Waiting for Injection to start")

        deployments = self.kubernetes_client.get_deployments_without_annotation(config)
        logger.info(
            "[Deployment retrieved]: Starting Cycle. num-deployment=%d", len(deployments)
        )

        metrics_window = rca.injection_duration + rca.injection_duration / 2
        for done, deployment in enumerate(deployments, start=1):
            logger.info("[Experiment Start]: Cycle started. deployment=%s", deployment.name)
            logger.info(
                "[Before Injection]: Sleeping. duration=%s",
                format_duration(rca.injection_duration),
            )
            _pause(config, self.sleep, rca.injection_duration)

            self.chaos_experiment.create_and_apply_network_delay(deployment, config)
            logger.info(
                "[Injection Period Start]: Injected. Sleeping. deployment=%s duration=%s",
                deployment.name,
                format_duration(rca.injection_duration),
            )
            _pause(config, self.sleep, rca.injection_duration)

            logger.info(
                "[Injection Period End]: Waiting for metrics export to complete duration=%s",
                format_duration(metrics_window),
            )
            self.kubernetes_client.create_metrics_processor_job(
                config,
                get_timestamped_name(f"{config.experiment_name}-{deployment.name}"),
                get_s3_key(config.metrics_processor_config.s3_bucket_dir, deployment.name),
                metrics_window,
            )
            logger.info(
                "[Experiment End]: Cycle completed. (%d/%d Done) deployment=%s",
                done,
                len(deployments),
                deployment.name,
            )
            logger.info("[Draining]: Sleeping for 1 minute.")
            _pause(config, self.sleep, _DRAIN_WAIT)

        logger.info("Duration complete. deleting loadgenerator deployment")
        self.kubernetes_client.delete_load_generator_deployment(config)