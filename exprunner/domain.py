"""Domain model of experiments and the resources they touch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from exprunner.utility import parse_duration

logger = logging.getLogger(__name__)

_FALLBACK_DURATION = timedelta(minutes=1)


@dataclass(frozen=True)
class Deployment:
    """A simplified Kubernetes deployment."""

    name: str
    namespace: str


@dataclass(frozen=True)
class ChaosResource:
    """A chaos resource aimed at a deployment."""

    name: str
    namespace: str
    deployment: Deployment


@dataclass(frozen=True)
class Job:
    """A simplified Kubernetes job."""

    name: str
    namespace: str
    deployment: Deployment


@dataclass(frozen=True)
class EnvVar:
    """A container environment variable."""

    name: str
    value: str


@dataclass
class LoadGeneratorConfig:
    """Settings for the load generator deployment."""

    config_map_name: str = ""
    image: str = ""
    image_tag: str = ""
    total_arrival_rate: str = ""
    frontend_addr: str = ""
    index_route: str = ""
    k6_prom_write_url: str = ""
    k6_trend_stats: str = ""

    def image_name(self) -> str:
        """The image reference, ``image:tag``."""
        return f"{self.image}:{self.image_tag}"


@dataclass
class MetricsProcessorConfig:
    """Settings for the metrics processor job."""

    config_map_name: str = ""
    image: str = ""
    image_tag: str = ""
    s3_bucket_dir: str = ""

    def image_name(self) -> str:
        """The image reference, ``image:tag``."""
        return f"{self.image}:{self.image_tag}"


@dataclass
class RCAExperimentConfig:
    """Timing and injection settings of a root-cause-analysis experiment."""

    normal_duration: timedelta = timedelta(minutes=5)
    injection_duration: timedelta = timedelta(minutes=1)
    latency: timedelta = timedelta(milliseconds=15)
    jitter: timedelta = timedelta(milliseconds=5)
    rca_injection_ignore_key: str = ""
    rca_injection_ignore_value: str = ""

    def total_duration(self) -> timedelta:
        """Normal period plus injection period."""
        return self.injection_duration + self.normal_duration


DEFAULT_RCA_EXPERIMENT_CONFIG = RCAExperimentConfig()


@dataclass
class ExperimentConfig:
    """Everything an experiment run needs to know."""

    experiment_name: str = ""
    target_namespace: str = ""
    experiment_namespace: str = ""
    k6_test_name: str = ""
    duration: str = ""
    arrival_rates: str = ""
    rca_config: RCAExperimentConfig = field(default_factory=RCAExperimentConfig)
    metrics_processor_config: MetricsProcessorConfig = field(
        default_factory=MetricsProcessorConfig
    )
    load_generator_config: LoadGeneratorConfig = field(default_factory=LoadGeneratorConfig)
    dry_run: bool = False

    def parsed_duration(self) -> timedelta:
        """The load duration; one minute if the configured text does not parse."""
        try:
            return parse_duration(self.duration)
        except ValueError as err:
            logger.error(
                "Failed to parse duration string. defaulting to 1 minute. err=%s", err
            )
            return _FALLBACK_DURATION

    def update_names_with_arrival_rate(self) -> None:
        """Set the k6 test name from the experiment name and arrival rate."""
        self.k6_test_name = self.name_with_arrival_rate()

    def name_with_arrival_rate(self) -> str:
        """The experiment name suffixed with the current total arrival rate."""
        return f"{self.experiment_name}-{self.load_generator_config.total_arrival_rate}"

    def load_generator_env(self) -> list[EnvVar]:
        """Environment variables handed to the load generator container."""
        lg = self.load_generator_config
        return [
            EnvVar("TEST_NAME", self.k6_test_name),
            EnvVar("TOTAL_ARRIVAL_RATE", lg.total_arrival_rate),
            EnvVar("DURATION", self.duration),
            EnvVar("FRONTEND_ADDR", lg.frontend_addr),
            EnvVar("INDEX_ROUTE", lg.index_route),
            EnvVar("K6_PROMETHEUS_RW_SERVER_URL", lg.k6_prom_write_url),
            EnvVar("K6_PROMETHEUS_RW_TREND_STATS", lg.k6_trend_stats),
        ]