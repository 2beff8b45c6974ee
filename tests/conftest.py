"""Shared fixtures: an in-memory IBM Cloud client and sample manifests."""
import json
from collections import Counter

import pytest

from ic_secretgen.secrets.domains.errors import KeyLookupError
from ic_secretgen.secrets.domains.models import GeneratorConfig, ResourceInstance, ServiceKey

REGION = "us-south"
REDIS_CRN = "crn:v1:bluemix:public:databases-for-redis:us-south:a/acc::redis-1"
CLOUDANT_CRN = "crn:v1:bluemix:public:cloudantnosqldb:us-south:a/acc::cloudant-1"
KAFKA_CRN = "crn:v1:bluemix:public:messagehub:us-south:a/acc::kafka-1"


def redis_bundle(url="rediss://x:y@host:6379/0", cert="Q0VSVA=="):
    return {
        "connection": {
            "cli": {
                "arguments": [["-u", url]],
                "certificate": {"certificate_base64": cert},
            }
        }
    }


def kafka_bundle():
    return {
        "user": "token",
        "password": "kafka-pass",
        "kafka_brokers_sasl": ["broker-0:9093", "broker-1:9093"],
    }


def cloudant_bundle():
    return {"username": "u", "password": "p", "host": "h.example.com"}


class FakeIBMClient:
    """In-memory stand-in for IBMCloudClient that counts calls."""

    def __init__(self, groups=None, instances=None, keys=None):
        self.groups = groups or {}
        self.instances = instances or {}
        self.keys = keys or {}
        self.calls = Counter()
        self.group_lookups = []
        self.authenticated = False

    def authenticate(self):
        self.authenticated = True

    def find_resource_groups(self, account_id, name):
        self.calls["find_resource_groups"] += 1
        self.group_lookups.append(name)
        value = self.groups.get(name, [])
        if isinstance(value, Exception):
            raise value
        return value

    def list_instances(self, name, resource_group_id):
        self.calls["list_instances"] += 1
        value = self.instances.get((name, resource_group_id), [])
        if isinstance(value, Exception):
            raise value
        return value

    def get_keys(self, key_name):
        self.calls["get_keys"] += 1
        if key_name not in self.keys:
            raise KeyLookupError(f"Service key '{key_name}' does not exist")
        value = self.keys[key_name]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_client():
    """Client knowing one redis, one kafka and one cloudant instance in us-south."""
    return FakeIBMClient(
        groups={"prod-rg": [{"id": "rg-123", "name": "prod-rg"}]},
        instances={
            ("my-redis", "rg-123"): [
                ResourceInstance(crn="crn:other-region", region_id="eu-de"),
                ResourceInstance(crn=REDIS_CRN, region_id=REGION),
            ],
            ("my-kafka", "rg-123"): [ResourceInstance(crn=KAFKA_CRN, region_id=REGION)],
            ("my-cloudant", "rg-123"): [ResourceInstance(crn=CLOUDANT_CRN, region_id=REGION)],
        },
        keys={
            "redis-public": [
                ServiceKey(name="redis-public", source_crn="crn:someone-else", credentials={"wrong": True}),
                ServiceKey(name="redis-public", source_crn=REDIS_CRN, credentials=redis_bundle()),
            ],
            "kafka-public": [ServiceKey(name="kafka-public", source_crn=KAFKA_CRN, credentials=kafka_bundle())],
            "cloudant-private": [
                ServiceKey(name="cloudant-private", source_crn=CLOUDANT_CRN, credentials=cloudant_bundle())
            ],
        },
    )


@pytest.fixture
def sample_manifest():
    return {
        "account": "acc",
        "region": REGION,
        "data": {
            "redis": [
                {
                    "output": "redis-secret",
                    "resource_group": "prod-rg",
                    "name": "my-redis",
                    "public_key_name": "redis-public",
                }
            ],
            "kafka": [
                {
                    "output": "kafka-secret",
                    "resource_group": "prod-rg",
                    "name": "my-kafka",
                    "public_key_name": "kafka-public",
                }
            ],
            "cloudant": [
                {
                    "output": "cloudant-secret",
                    "resource_group": "prod-rg",
                    "name": "my-cloudant",
                    "private_key_name": "cloudant-private",
                }
            ],
        },
    }


@pytest.fixture
def manifest_file(tmp_path, sample_manifest):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps(sample_manifest))
    return path


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def generator_config(manifest_file, output_dir):
    return GeneratorConfig(
        namespace="apps",
        input_file=str(manifest_file),
        api_key="test-key",
        output_dir=str(output_dir),
    )
