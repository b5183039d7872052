from datetime import timedelta

import pytest

from exprunner.domain import (
    DEFAULT_RCA_EXPERIMENT_CONFIG,
    ChaosResource,
    Deployment,
    EnvVar,
    ExperimentConfig,
    Job,
    LoadGeneratorConfig,
    MetricsProcessorConfig,
    RCAExperimentConfig,
)


@pytest.fixture
def config():
    return ExperimentConfig(
        experiment_name="test",
        target_namespace="emulation",
        experiment_namespace="experiment",
        duration="30s",
        metrics_processor_config=MetricsProcessorConfig(
            config_map_name="metrics-processor",
            image="metrics-processor",
            image_tag="v1.0.0",
            s3_bucket_dir="test",
        ),
        load_generator_config=LoadGeneratorConfig(
            config_map_name="test-lg",
            image="grafana/k6",
            image_tag="0.47.0",
            total_arrival_rate="100",
            frontend_addr="frontend:80",
            index_route="/",
            k6_prom_write_url="http://prometheus-kube-prometheus-prometheus.monitoring.svc.cluster.local:9090/api/v1/write",
            k6_trend_stats="p(95),p(99),avg",
        ),
    )


def test_image_names(config):
    assert config.load_generator_config.image_name() == "grafana/k6:0.47.0"
    assert config.metrics_processor_config.image_name() == "metrics-processor:v1.0.0"


def test_default_rca_config():
    assert DEFAULT_RCA_EXPERIMENT_CONFIG.total_duration() == timedelta(minutes=6)
    assert DEFAULT_RCA_EXPERIMENT_CONFIG.normal_duration == timedelta(minutes=5)
    assert DEFAULT_RCA_EXPERIMENT_CONFIG.injection_duration == timedelta(minutes=1)
    assert DEFAULT_RCA_EXPERIMENT_CONFIG.latency == timedelta(milliseconds=15)
    assert DEFAULT_RCA_EXPERIMENT_CONFIG.jitter == timedelta(milliseconds=5)


def test_total_duration_is_sum():
    rca = RCAExperimentConfig(
        normal_duration=timedelta(minutes=3), injection_duration=timedelta(seconds=20)
    )
    assert rca.total_duration() == rca.normal_duration + rca.injection_duration


def test_parsed_duration(config):
    assert config.parsed_duration() == timedelta(seconds=30)


def test_parsed_duration_falls_back_to_minute(config):
    config.duration = "forever"
    assert config.parsed_duration() == timedelta(minutes=1)


def test_name_with_arrival_rate(config):
    assert config.name_with_arrival_rate() == "test-100"


def test_update_names_with_arrival_rate(config):
    config.load_generator_config.total_arrival_rate = "500"
    config.update_names_with_arrival_rate()
    assert config.k6_test_name == "test-500"


def test_load_generator_env(config):
    config.update_names_with_arrival_rate()
    env = config.load_generator_env()
    assert [var.name for var in env] == [
        "TEST_NAME",
        "TOTAL_ARRIVAL_RATE",
        "DURATION",
        "FRONTEND_ADDR",
        "INDEX_ROUTE",
        "K6_PROMETHEUS_RW_SERVER_URL",
        "K6_PROMETHEUS_RW_TREND_STATS",
    ]
    values = {var.name: var.value for var in env}
    assert values["TEST_NAME"] == "test-100"
    assert values["TOTAL_ARRIVAL_RATE"] == "100"
    assert values["DURATION"] == "30s"
    assert values["FRONTEND_ADDR"] == "frontend:80"
    assert values["K6_PROMETHEUS_RW_TREND_STATS"] == "p(95),p(99),avg"


def test_resources_hold_deployment():
    deployment = Deployment(name="frontend", namespace="emulation")
    chaos = ChaosResource(name="c", namespace="experiment", deployment=deployment)
    job = Job(name="j", namespace="experiment", deployment=deployment)
    assert chaos.deployment == job.deployment == Deployment("frontend", "emulation")


def test_env_var_equality():
    assert EnvVar("A", "1") == EnvVar(name="A", value="1")
    assert EnvVar("A", "1") != EnvVar("A", "2")