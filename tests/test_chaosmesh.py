from datetime import timedelta

import pytest
import requests
import yaml

from exprunner.chaosmesh import ChaosMeshAdapter, ChaosMeshClient, ChaosMeshError
from exprunner.chaosobject import (
    CHAOS_MESH_GROUP,
    CHAOS_MESH_NETWORK_CHAOS_RESOURCE,
    CHAOS_MESH_NETWORK_CHAOS_RESOURCE_PLURAL,
    CHAOS_MESH_VERSION,
)
from exprunner.domain import Deployment, ExperimentConfig, RCAExperimentConfig
from exprunner.utility import format_duration, parse_duration

API = "https://cluster.example.com:6443"


class _Response:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class _Session:
    def __init__(self, status_code=201, error=None):
        self.status_code = status_code
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json))
        if self.error is not None:
            raise self.error
        return _Response(self.status_code, "conflict")


def _config(dry_run):
    return ExperimentConfig(
        experiment_name="exp",
        experiment_namespace="experiment",
        target_namespace="emulation",
        rca_config=RCAExperimentConfig(
            injection_duration=timedelta(minutes=2),
            latency=timedelta(milliseconds=15),
            jitter=timedelta(milliseconds=5),
        ),
        dry_run=dry_run,
    )


def test_dry_run_writes_manifest(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = _config(dry_run=True)
    deployment = Deployment("frontend", "emulation")

    ChaosMeshAdapter().create_and_apply_network_delay(deployment, config)

    document = yaml.safe_load((tmp_path / "frontend-network-chaos.yaml").read_text())
    assert document["kind"] == CHAOS_MESH_NETWORK_CHAOS_RESOURCE
    assert document["apiVersion"] == f"{CHAOS_MESH_GROUP}/{CHAOS_MESH_VERSION}"
    assert document["metadata"]["namespace"] == "experiment"
    assert document["metadata"]["name"].startswith("exp-frontend-")
    spec = document["spec"]
    assert spec["labelSelectors"] == {"app": "frontend"}
    assert spec["namespaces"] == ["emulation"]
    assert spec["delay"]["latency"] == format_duration(config.rca_config.latency)
    assert spec["delay"]["jitter"] == format_duration(config.rca_config.jitter)
    assert parse_duration(spec["duration"]) == config.rca_config.injection_duration


def test_apply_posts_to_namespaced_collection():
    session = _Session()
    adapter = ChaosMeshAdapter(ChaosMeshClient(API + "/", session=session))
    adapter.create_and_apply_network_delay(
        Deployment("cart", "emulation"), _config(dry_run=False)
    )

    assert len(session.posts) == 1
    url, body = session.posts[0]
    assert url == (
        f"{API}/apis/{CHAOS_MESH_GROUP}/{CHAOS_MESH_VERSION}"
        f"/namespaces/experiment/{CHAOS_MESH_NETWORK_CHAOS_RESOURCE_PLURAL}"
    )
    assert body["spec"]["action"] == "delay"
    assert body["spec"]["direction"] == "both"
    assert body["spec"]["mode"] == "all"
    assert body["spec"]["target"]["selector"] == {"namespaces": ["emulation"]}


def test_rejected_request_raises():
    client = ChaosMeshClient(API, session=_Session(status_code=409))
    adapter = ChaosMeshAdapter(client)
    with pytest.raises(ChaosMeshError, match="409"):
        adapter.create_and_apply_network_delay(
            Deployment("cart", "emulation"), _config(dry_run=False)
        )


def test_connection_error_is_wrapped():
    session = _Session(error=requests.ConnectionError("refused"))
    adapter = ChaosMeshAdapter(ChaosMeshClient(API, session=session))
    with pytest.raises(ChaosMeshError) as info:
        adapter.create_and_apply_network_delay(
            Deployment("cart", "emulation"), _config(dry_run=False)
        )
    assert isinstance(info.value.__cause__, requests.ConnectionError)


def test_missing_client_outside_dry_run_raises():
    with pytest.raises(ChaosMeshError):
        ChaosMeshAdapter().create_and_apply_network_delay(
            Deployment("cart", "emulation"), _config(dry_run=False)
        )