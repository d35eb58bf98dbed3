from __future__ import annotations

from datetime import datetime, timezone

import yaml

from xcompose.core.apis import Composition, CompositionRevision

from helpers.builders import composition_dict, template

COMPOSITION_YAML = """
apiVersion: apiextensions.crossplane.io/v1
kind: Composition
metadata:
  name: example
  uid: 1234
  creationTimestamp: 2023-06-01T10:00:00Z
spec:
  compositeTypeRef:
    apiVersion: example.org/v1
    kind: XDatabase
  writeConnectionSecretsToNamespace: crossplane-system
  resources:
    - name: db
      base:
        apiVersion: nop.example.org/v1
        kind: NopResource
      patches:
        - fromFieldPath: spec.size
          toFieldPath: spec.forProvider.size
          transforms:
            - math:
                multiply: 2
          someFutureField: true
      connectionDetails:
        - fromConnectionSecretKey: password
"""


def test_load_and_dump_preserves_document() -> None:
    doc = yaml.safe_load(COMPOSITION_YAML)
    out = Composition.from_dict(doc).to_dict()

    assert out["metadata"]["uid"] == 1234
    assert out["metadata"]["creationTimestamp"] == "2023-06-01T10:00:00Z"
    assert out["spec"]["writeConnectionSecretsToNamespace"] == "crossplane-system"
    patch = out["spec"]["resources"][0]["patches"][0]
    assert patch == {
        "fromFieldPath": "spec.size",
        "toFieldPath": "spec.forProvider.size",
        "transforms": [{"math": {"multiply": 2}}],
        "someFutureField": True,
    }
    assert out["spec"]["resources"][0]["connectionDetails"] == [{"fromConnectionSecretKey": "password"}]


def test_naive_datetime_timestamp_is_treated_as_utc() -> None:
    doc = composition_dict()
    doc["metadata"]["creationTimestamp"] = datetime(2024, 1, 2, 3, 4, 5)
    comp = Composition.from_dict(doc)
    assert comp.metadata.creation_timestamp == "2024-01-02T03:04:05Z"

    doc["metadata"]["creationTimestamp"] = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert Composition.from_dict(doc).metadata.creation_timestamp == "2024-01-02T03:04:05Z"


def test_fractional_seconds_are_kept() -> None:
    doc = yaml.safe_load(
        "apiVersion: apiextensions.crossplane.io/v1\n"
        "kind: Composition\n"
        "metadata:\n"
        "  name: example\n"
        "  creationTimestamp: 2023-06-01T10:00:00.123456Z\n"
        "spec: {}\n"
    )
    assert isinstance(doc["metadata"]["creationTimestamp"], datetime)

    comp = Composition.from_dict(doc)
    assert comp.metadata.creation_timestamp == "2023-06-01T10:00:00.123456Z"

    doc["metadata"]["creationTimestamp"] = datetime(2023, 6, 1, 10, 0, 0, 500000, tzinfo=timezone.utc)
    assert Composition.from_dict(doc).metadata.creation_timestamp == "2023-06-01T10:00:00.5Z"

def test_unknown_spec_fields_round_trip() -> None:
    doc = composition_dict(resources=[template("a")], functions=[{"name": "legacy"}])
    out = Composition.from_dict(doc).to_dict()
    assert out["spec"]["functions"] == [{"name": "legacy"}]


def test_revision_from_composition_is_independent_copy() -> None:
    comp = Composition.from_dict(composition_dict(resources=[template("a"), template()]))
    rev = CompositionRevision.from_composition(comp, revision=3)

    assert rev.metadata.name == "example-3"
    assert rev.spec.revision == 3
    assert rev.anonymous_templates() == [1]

    rev.spec.resources[0].name = "changed"
    assert comp.spec.resources[0].name == "a"


def test_pipeline_mode_detection() -> None:
    assert Composition.from_dict(composition_dict(mode="Pipeline")).is_pipeline_mode()
    assert not Composition.from_dict(composition_dict(mode="Resources")).is_pipeline_mode()
    assert not Composition.from_dict(composition_dict()).is_pipeline_mode()
