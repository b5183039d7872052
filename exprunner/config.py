"""Experiment configuration read from environment variables."""

from __future__ import annotations

import functools
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from exprunner.domain import (
    DEFAULT_RCA_EXPERIMENT_CONFIG,
    ExperimentConfig,
    LoadGeneratorConfig,
    MetricsProcessorConfig,
    RCAExperimentConfig,
)
from exprunner.utility import parse_duration_with_default

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


@dataclass(frozen=True)
class EnvVars:
    """Raw settings; each field is read from the upper-cased variable of its name."""

    experiment_name: str = "test"
    target_namespace: str = "emulation"
    experiment_namespace: str = "experiment"
    k6_test_name: str = "test"
    duration: str = "30s"
    arrival_rates: str = "10,50,100,500,1000"

    metrics_processor_config_map_name: str = "metrics-processor-env"
    metrics_processor_image: str = "docker.io/hiroki11hanada/metrics-processor"
    metrics_processor_image_tag: str = "latest"
    metrics_processor_s3_bucket_dir: str = "test"

    rca_normal_duration: str = ""
    rca_injection_duration: str = ""
    rca_latency: str = ""
    rca_jitter: str = ""
    rca_injection_ignore_key: str = "rca"
    rca_injection_ignore_value: str = "ignore"

    lg_config_map_name: str = "lg-script"
    lg_image: str = "grafana/k6"
    lg_image_tag: str = "0.47.0"
    lg_frontend_addr: str = "frontend.emulation.svc.cluster.local:80"
    lg_index_route: str = "/"
    lg_k6_prometheus_rw_server_url: str = (
        "http://prometheus-kube-prometheus-prometheus.monitoring.svc.cluster.local:9090/api/v1/write"
    )
    lg_k6_prometheus_rw_trend_stats: str = "p(95),p(99),avg"


def read_env(key: str, default: str, environ: Mapping[str, str] | None = None) -> str:
    """The variable's value if it is set, even to an empty string; else ``default``."""
    source = os.environ if environ is None else environ
    return source.get(key, default)


def read_bool_env(
    key: str, default: bool, environ: Mapping[str, str] | None = None
) -> bool:
    """The variable read as a boolean; ``default`` when unset or unparsable."""
    source = os.environ if environ is None else environ
    value = source.get(key)
    if value is None:
        return default
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    return default


def load_env_variables(environ: Mapping[str, str] | None = None) -> EnvVars:
    """Read every setting from the environment, using defaults for the missing ones."""
    return EnvVars(
        **{
            spec.name: read_env(spec.name.upper(), spec.default, environ)
            for spec in fields(EnvVars)
        }
    )


@functools.lru_cache(maxsize=None)
def get_envs() -> EnvVars:
    """Settings from the process environment, read once and then reused."""
    return load_env_variables()


def new_load_generator_config(envs: EnvVars | None = None) -> LoadGeneratorConfig:
    """Load generator settings from the environment."""
    envs = envs or get_envs()
    return LoadGeneratorConfig(
        config_map_name=envs.lg_config_map_name,
        image=envs.lg_image,
        image_tag=envs.lg_image_tag,
        frontend_addr=envs.lg_frontend_addr,
        index_route=envs.lg_index_route,
        k6_prom_write_url=envs.lg_k6_prometheus_rw_server_url,
        k6_trend_stats=envs.lg_k6_prometheus_rw_trend_stats,
    )


def new_metrics_processor_config(envs: EnvVars | None = None) -> MetricsProcessorConfig:
    """Metrics processor settings from the environment."""
    envs = envs or get_envs()
    return MetricsProcessorConfig(
        config_map_name=envs.metrics_processor_config_map_name,
        image=envs.metrics_processor_image,
        image_tag=envs.metrics_processor_image_tag,
        s3_bucket_dir=envs.metrics_processor_s3_bucket_dir,
    )


def new_rca_experiment_config(envs: EnvVars | None = None) -> RCAExperimentConfig:
    """RCA settings from the environment; unparsable durations take the defaults."""
    envs = envs or get_envs()
    defaults = DEFAULT_RCA_EXPERIMENT_CONFIG
    return RCAExperimentConfig(
        normal_duration=parse_duration_with_default(
            envs.rca_normal_duration, defaults.normal_duration
        ),
        injection_duration=parse_duration_with_default(
            envs.rca_injection_duration, defaults.injection_duration
        ),
        latency=parse_duration_with_default(envs.rca_latency, defaults.latency),
        jitter=parse_duration_with_default(envs.rca_jitter, defaults.jitter),
        rca_injection_ignore_key=envs.rca_injection_ignore_key,
        rca_injection_ignore_value=envs.rca_injection_ignore_value,
    )


def new_experiment_config(
    dry_run: bool = False, envs: EnvVars | None = None
) -> ExperimentConfig:
    """A complete experiment configuration from the environment."""
    envs = envs or get_envs()
    return ExperimentConfig(
        experiment_name=envs.experiment_name,
        experiment_namespace=envs.experiment_namespace,
        target_namespace=envs.target_namespace,
        k6_test_name=envs.k6_test_name,
        duration=envs.duration,
        arrival_rates=envs.arrival_rates,
        rca_config=new_rca_experiment_config(envs),
        metrics_processor_config=new_metrics_processor_config(envs),
        load_generator_config=new_load_generator_config(envs),
        dry_run=dry_run,
    )