# exprunner

`exprunner` is a library for running performance experiments against services
on a Kubernetes cluster. It covers two kinds of experiment:

- **Load tests** (`exprunner.services.LoadTestRunner`). For each arrival rate
  in a comma-separated list, a load generator deployment is created. The runner
  waits one minute for start-up and then the configured duration. It deletes
  the deployment and starts a metrics-processor job for that run.
- **Root-cause-analysis experiments** (`exprunner.services.RCAExperimentRunner`).
  A load generator runs at the first listed arrival rate. Its duration is set to
  twice the normal period plus the injection period. After a one-minute start-up
  wait and the normal period, a metrics-processor job is started for the normal
  period. The runner then takes each deployment returned by the Kubernetes port
  in turn and runs one cycle:
  1. Wait one injection period.
  2. Inject network delay.
  3. Wait another injection period.
  4. Start a metrics-processor job covering one and a half injection periods.
  5. Drain for one minute.

  At the end the load generator deployment is deleted.

When `ExperimentConfig.dry_run` is true, the runners skip every wait. In that
case `ChaosMeshAdapter` does not contact the cluster. It writes the
`NetworkChaos` manifest to `<deployment>-network-chaos.yaml` in the working
directory instead.

## Modules

| Module | Contents |
| --- | --- |
| `exprunner.utility` | `parse_duration` and `format_duration` (durations written like `1m30s`, `250ms`), `parse_duration_with_default`, `get_timestamped_name` (appends the current Japan time as `mm-dd-hh-mm-ss`), `get_s3_key` |
| `exprunner.manifest` | `write_kubernetes_manifest(obj, path)` dumps an object as YAML, replacing any existing file |
| `exprunner.domain` | `ExperimentConfig`, `RCAExperimentConfig`, `LoadGeneratorConfig`, `MetricsProcessorConfig`, `Deployment`, `Job`, `ChaosResource`, `EnvVar` |
| `exprunner.config` | `EnvVars`, `read_env`, `read_bool_env`, `load_env_variables`, `get_envs`, `new_experiment_config` and the `new_*_config` builders |
| `exprunner.crd` | Chaos Mesh `NetworkChaos` resource types (`NetworkChaos`, `NetworkChaosSpec`, `PodSelector`, `DelaySpec`, …) with `to_dict()` |
| `exprunner.chaosobject` | `NetworkChaosArgs`, `construct_network_chaos`, `construct_network_chaos_spec` |
| `exprunner.ports` | Abstract `KubernetesClientPort` and `ChaosExperimentsPort` |
| `exprunner.chaosmesh` | `ChaosMeshClient`, `ChaosMeshAdapter`, `ChaosMeshError` |
| `exprunner.services` | `LoadTestRunner`, `RCAExperimentRunner` |

## Configuration

`exprunner.config.get_envs()` reads the process environment once and caches
the result. Each field of `EnvVars` is read from the upper-cased variable of
the same name. A variable that is set, even to an empty string, is taken
as-is. An unset variable takes the default below.

| Variable | Default |
| --- | --- |
| `EXPERIMENT_NAME` | `test` |
| `TARGET_NAMESPACE` | `emulation` |
| `EXPERIMENT_NAMESPACE` | `experiment` |
| `K6_TEST_NAME` | `test` |
| `DURATION` | `30s` |
| `ARRIVAL_RATES` | `10,50,100,500,1000` |
| `METRICS_PROCESSOR_CONFIG_MAP_NAME` | `metrics-processor-env` |
| `METRICS_PROCESSOR_IMAGE` | see `EnvVars.metrics_processor_image` |
| `METRICS_PROCESSOR_IMAGE_TAG` | `latest` |
| `METRICS_PROCESSOR_S3_BUCKET_DIR` | `test` |
| `RCA_NORMAL_DURATION` | empty, so `5m` is used |
| `RCA_INJECTION_DURATION` | empty, so `1m` is used |
| `RCA_LATENCY` | empty, so `15ms` is used |
| `RCA_JITTER` | empty, so `5ms` is used |
| `RCA_INJECTION_IGNORE_KEY` | `rca` |
| `RCA_INJECTION_IGNORE_VALUE` | `ignore` |
| `LG_CONFIG_MAP_NAME` | `lg-script` |
| `LG_IMAGE` | `grafana/k6` |
| `LG_IMAGE_TAG` | `0.47.0` |
| `LG_FRONTEND_ADDR` | `frontend.emulation.svc.cluster.local:80` |
| `LG_INDEX_ROUTE` | `/` |
| `LG_K6_PROMETHEUS_RW_SERVER_URL` | `http://prometheus-kube-prometheus-prometheus.monitoring.svc.cluster.local:9090/api/v1/write` |
| `LG_K6_PROMETHEUS_RW_TREND_STATS` | `p(95),p(99),avg` |

The RCA durations must parse with `parse_duration`. A value that does not parse
falls back to the default shown. If `ExperimentConfig.duration` does not parse,
`parsed_duration()` logs an error and uses one minute.

The `new_*_config` builders accept an `EnvVars` instance. Pass one to build a
configuration without reading the process environment:

```python
from exprunner.config import load_env_variables, new_experiment_config

envs = load_env_variables({"EXPERIMENT_NAME": "demo", "RCA_LATENCY": "50ms"})
config = new_experiment_config(dry_run=True, envs=envs)
```

## Building a network-chaos manifest

```python
from exprunner.chaosobject import NetworkChaosArgs, construct_network_chaos
from exprunner.manifest import write_kubernetes_manifest

chaos = construct_network_chaos(
    NetworkChaosArgs(
        name="demo-frontend",
        target_namespace="emulation",
        experiment_namespace="experiment",
        selector={"app": "frontend"},
        duration="1m0s",
        latency="15ms",
        jitter="5ms",
    )
)
write_kubernetes_manifest(chaos, "frontend-network-chaos.yaml")
```

The resource lives in the experiment namespace. It applies a `delay` action in
`both` directions. It selects all pods labelled `app=frontend` in the target
namespace and targets every pod in that namespace.

## Applying chaos to a cluster

`ChaosMeshClient(api_server, session=None, timeout=30.0)` creates the resource
by POSTing its `to_dict()` form to
`<api_server>/apis/chaos-mesh.org/v1alpha1/namespaces/<namespace>/networkchaos`.
To authenticate, pass a `requests.Session` that already carries your
credentials and TLS settings. A request error or a non-2xx response raises
`ChaosMeshError`.

`ChaosMeshAdapter(client)` implements `ChaosExperimentsPort`. The chaos it
builds is named after the experiment and the deployment, with a timestamp. It
uses the RCA injection duration, latency and jitter. If the run is not dry and
no client was given, it raises `ChaosMeshError`.

## Running experiments

```python
from exprunner.config import new_experiment_config
from exprunner.services import LoadTestRunner

runner = LoadTestRunner(my_kubernetes_port, new_experiment_config())
runner.run()
```

Both runners take an optional `sleep` callable, which defaults to
`time.sleep`. They do not catch exceptions, so any exception raised by a port
stops the experiment at that point.

## What this package does not include

- **No Kubernetes adapter.** `KubernetesClientPort` is abstract. Listing
  deployments, creating and deleting the load generator deployment, and
  creating metrics-processor jobs must be supplied by your own implementation.
- **No kubeconfig loading.** The package does not read a kubeconfig and does
  not handle cluster authentication. `ChaosMeshClient` is given an API server
  URL and a session.
- **No command-line interface.** Experiments are started from Python.

## Tests

The test suite uses pytest. It is installed with the `test` extra:

```
pip install -e ".[test]"
pytest
```