from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
import yaml

from xcompose.cli._dispatcher import build_parser, main
from xcompose.core.apis import COMPOSITION_VALIDATION_MODE_ANNOTATION

from helpers.builders import composed, composite, composition_dict, template


def _dump(path: Path, *docs: dict) -> Path:
    path.write_text(yaml.safe_dump_all(list(docs), sort_keys=False), encoding="utf-8")
    return path


def test_parser_discovers_domains() -> None:
    parser = build_parser()
    args = parser.parse_args(["composition", "validation-mode", "comp.yaml"])
    assert args.domain == "composition"
    assert callable(args._func)


def test_no_domain_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "composition" in capsys.readouterr().out


def test_convert_to_stdout(isolated_project_env: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = _dump(isolated_project_env / "comp.yaml", composition_dict(resources=[template()]))

    assert main(["composition", "convert", str(src)]) == 0

    out = yaml.safe_load(capsys.readouterr().out)
    assert out["spec"]["mode"] == "Pipeline"
    step = out["spec"]["pipeline"][0]
    assert step["functionRef"]["name"] == "function-patch-and-transform"
    assert step["input"]["resources"][0]["name"] == "resource-0"


def test_convert_to_file_with_function_name(isolated_project_env: Path) -> None:
    src = _dump(
        isolated_project_env / "comps.yaml",
        composition_dict("one", resources=[template("a")]),
        {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cm"}},
    )
    dest = isolated_project_env / "out.yaml"

    assert main(["composition", "convert", str(src), "-o", str(dest), "-f", "function-custom"]) == 0

    docs = list(yaml.safe_load_all(dest.read_text(encoding="utf-8")))
    assert docs[0]["spec"]["pipeline"][0]["functionRef"]["name"] == "function-custom"
    assert docs[1] == {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cm"}}


def test_convert_uses_configured_function_name(isolated_project_env: Path, capsys) -> None:
    (isolated_project_env / ".xcompose" / "config" / "migration.yaml").write_text(
        "migration:\n  functionName: function-configured\n  stepName: migrated\n", encoding="utf-8"
    )
    src = _dump(isolated_project_env / "comp.yaml", composition_dict(resources=[template("a")]))

    assert main(["composition", "convert", str(src)]) == 0

    step = yaml.safe_load(capsys.readouterr().out)["spec"]["pipeline"][0]
    assert step["functionRef"]["name"] == "function-configured"
    assert step["step"] == "migrated"


def test_convert_empty_file_fails(isolated_project_env: Path, capsys) -> None:
    src = isolated_project_env / "empty.yaml"
    src.write_text("", encoding="utf-8")

    assert main(["composition", "convert", str(src)]) == 1
    assert "no YAML document found" in capsys.readouterr().err


def test_convert_keeps_non_object_documents(isolated_project_env: Path) -> None:
    src = isolated_project_env / "mixed.yaml"
    src.write_text(
        yaml.safe_dump(composition_dict(resources=[template("a")]), sort_keys=False)
        + "---\n- a\n- b\n---\nplain\n---\n",
        encoding="utf-8",
    )
    dest = isolated_project_env / "out.yaml"

    assert main(["composition", "convert", str(src), "-o", str(dest)]) == 0

    docs = list(yaml.safe_load_all(dest.read_text(encoding="utf-8")))
    assert len(docs) == 3
    assert docs[0]["spec"]["mode"] == "Pipeline"
    assert docs[1] == ["a", "b"]
    assert docs[2] == "plain"

def test_convert_reads_stdin(
    isolated_project_env: Path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(yaml.safe_dump(composition_dict(resources=[template("a")]))))

    assert main(["composition", "convert", "-"]) == 0

    out = yaml.safe_load(capsys.readouterr().out)
    assert out["spec"]["mode"] == "Pipeline"

def test_validation_mode_json(isolated_project_env: Path, capsys) -> None:
    src = _dump(
        isolated_project_env / "comp.yaml",
        composition_dict(annotations={COMPOSITION_VALIDATION_MODE_ANNOTATION: "strict"}),
    )

    assert main(["composition", "validation-mode", str(src), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "success"
    assert payload["mode"] == "strict"
    assert payload["name"] == "example"


def test_validation_mode_invalid_value(isolated_project_env: Path, capsys) -> None:
    src = _dump(
        isolated_project_env / "comp.yaml",
        composition_dict(annotations={COMPOSITION_VALIDATION_MODE_ANNOTATION: "Strict"}),
    )

    assert main(["composition", "validation-mode", str(src), "--json"]) == 1

    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "InvalidValidationModeError"
    assert err["details"]["context"]["value"] == "Strict"


def test_check_fallback_for_unannotated_resource(isolated_project_env: Path, capsys) -> None:
    legacy = composed("legacy-db")
    xr = _dump(isolated_project_env / "xr.yaml", composite(legacy).to_dict())
    comp = _dump(isolated_project_env / "comp.yaml", composition_dict(resources=[template("db")]))
    resources = _dump(isolated_project_env / "resources.yaml", legacy.to_dict())

    rc = main([
        "composite", "check-fallback",
        "--xr", str(xr),
        "--revision", str(comp),
        "--resources", str(resources),
        "--json",
    ])

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["fallback"] is True
    assert payload["composer"] == "legacy"
    assert payload["revision"] == "example-1"


def test_check_fallback_for_named_templates(isolated_project_env: Path, capsys) -> None:
    db = composed("db-1", resource_name="db")
    xr = _dump(isolated_project_env / "xr.yaml", composite(db, composed("deleted")).to_dict())
    comp = _dump(isolated_project_env / "comp.yaml", composition_dict(resources=[template("db")]))
    resources = _dump(isolated_project_env / "resources.yaml", db.to_dict())

    rc = main([
        "composite", "check-fallback",
        "--xr", str(xr), "--revision", str(comp), "--resources", str(resources),
    ])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "cool-xr: pipeline composer"


def test_check_fallback_rejects_non_object_resources(isolated_project_env: Path, capsys) -> None:
    xr = _dump(isolated_project_env / "xr.yaml", composite().to_dict())
    comp = _dump(isolated_project_env / "comp.yaml", composition_dict(resources=[template("db")]))
    resources = isolated_project_env / "resources.yaml"
    resources.write_text("kind: Thing\n---\n- stray\n", encoding="utf-8")

    rc = main([
        "composite", "check-fallback",
        "--xr", str(xr), "--revision", str(comp), "--resources", str(resources), "--json",
    ])

    assert rc == 1
    err = json.loads(capsys.readouterr().err)
    assert err["error"] == "InvalidDocumentError"
    assert err["details"]["context"]["index"] == 1

def test_features_list(isolated_project_env: Path, capsys, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XCOMPOSE_FEATURES__ENABLED", '["EnableAlphaCompositionFunctions"]')

    assert main(["features", "list", "--json"]) == 0

    rows = {r["name"]: r["enabled"] for r in json.loads(capsys.readouterr().out)["features"]}
    assert rows["EnableAlphaCompositionFunctions"] is True
    assert rows["EnableProviderIdentity"] is False


def test_logging_file_is_configured(isolated_project_env: Path, capsys) -> None:
    (isolated_project_env / ".xcompose" / "config" / "logging.yaml").write_text(
        "logging:\n  level: DEBUG\n  file: logs/xcompose.log\n", encoding="utf-8"
    )
    src = _dump(isolated_project_env / "comp.yaml", composition_dict(resources=[template("a")]))

    assert main(["composition", "convert", str(src)]) == 0

    log = (isolated_project_env / "logs" / "xcompose.log").read_text(encoding="utf-8")
    assert "Converted composition example" in log
