import os
from dataclasses import replace
from datetime import timedelta

import pytest

from exprunner.config import (
    EnvVars,
    get_envs,
    load_env_variables,
    new_experiment_config,
    new_load_generator_config,
    new_metrics_processor_config,
    new_rca_experiment_config,
    read_bool_env,
    read_env,
)
from exprunner.domain import DEFAULT_RCA_EXPERIMENT_CONFIG


def test_read_env_present_and_missing():
    environ = {"NAME": "value", "EMPTY": ""}
    assert read_env("NAME", "fallback", environ) == "value"
    assert read_env("EMPTY", "fallback", environ) == ""
    assert read_env("MISSING", "fallback", environ) == "fallback"


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("t", True), ("TRUE", True), ("True", True),
     ("0", False), ("f", False), ("FALSE", False), ("false", False)],
)
def test_read_bool_env_parses(raw, expected):
    assert read_bool_env("FLAG", not expected, {"FLAG": raw}) is expected


def test_read_bool_env_defaults():
    assert read_bool_env("FLAG", True, {}) is True
    assert read_bool_env("FLAG", True, {"FLAG": "yes"}) is True
    assert read_bool_env("FLAG", False, {"FLAG": "nope"}) is False


def test_load_env_variables_defaults():
    assert load_env_variables({}) == EnvVars()


def test_load_env_variables_overrides():
    envs = load_env_variables(
        {"EXPERIMENT_NAME": "chaos", "ARRIVAL_RATES": "5,10", "LG_IMAGE_TAG": "1.0"}
    )
    assert envs.experiment_name == "chaos"
    assert envs.arrival_rates == "5,10"
    assert envs.lg_image_tag == "1.0"
    assert envs.target_namespace == "emulation"


def test_get_envs_is_cached(monkeypatch):
    first = get_envs()
    assert first == load_env_variables(dict(os.environ))
    monkeypatch.setenv("EXPERIMENT_NAME", "changed-after-load")
    second = get_envs()
    assert second is first
    assert second.experiment_name == first.experiment_name
    assert second.experiment_name != "changed-after-load"


def test_new_load_generator_config():
    lg = new_load_generator_config(EnvVars())
    assert lg.image_name() == "grafana/k6:0.47.0"
    assert lg.config_map_name == "lg-script"
    assert lg.frontend_addr == "frontend.emulation.svc.cluster.local:80"
    assert lg.k6_trend_stats == "p(95),p(99),avg"
    assert lg.total_arrival_rate == ""


def test_new_metrics_processor_config():
    mp = new_metrics_processor_config(EnvVars())
    assert mp.image_name() == "docker.io/hiroki11hanada/metrics-processor:latest"
    assert mp.config_map_name == "metrics-processor-env"
    assert mp.s3_bucket_dir == "test"


def test_new_rca_config_defaults_when_unset():
    rca = new_rca_experiment_config(EnvVars())
    assert rca.normal_duration == DEFAULT_RCA_EXPERIMENT_CONFIG.normal_duration
    assert rca.injection_duration == DEFAULT_RCA_EXPERIMENT_CONFIG.injection_duration
    assert rca.latency == DEFAULT_RCA_EXPERIMENT_CONFIG.latency
    assert rca.jitter == DEFAULT_RCA_EXPERIMENT_CONFIG.jitter
    assert rca.rca_injection_ignore_key == "rca"
    assert rca.rca_injection_ignore_value == "ignore"


def test_new_rca_config_parses_values():
    envs = replace(EnvVars(), rca_latency="20ms", rca_normal_duration="10m", rca_jitter="bad")
    rca = new_rca_experiment_config(envs)
    assert rca.latency == timedelta(milliseconds=20)
    assert rca.normal_duration == timedelta(minutes=10)
    assert rca.jitter == DEFAULT_RCA_EXPERIMENT_CONFIG.jitter


def test_new_experiment_config():
    envs = replace(EnvVars(), experiment_name="exp")
    config = new_experiment_config(True, envs)
    assert config.dry_run is True
    assert config.experiment_name == "exp"
    assert config.experiment_namespace == "experiment"
    assert config.target_namespace == "emulation"
    assert config.duration == "30s"
    assert config.arrival_rates == "10,50,100,500,1000"
    assert config.load_generator_config == new_load_generator_config(envs)
    assert config.metrics_processor_config == new_metrics_processor_config(envs)
    assert config.rca_config == new_rca_experiment_config(envs)


def test_new_experiment_config_default_not_dry():
    assert new_experiment_config(envs=EnvVars()).dry_run is False