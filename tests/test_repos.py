import json
from pathlib import Path

import pytest

from modmaven.artifact import Artifact
from modmaven.cache import verify_hash
from modmaven.errors import InvalidVersionError, SourceNotFoundError
from modmaven.repos.local import LocalRepo, artifact_for
from modmaven.repos.parchment import ParchmentRepo

PARCHMENT = "net.minecraft:mappings_parchment"


def test_parchment_publishes_metadata_and_pom(cache, output):
    outputs = ParchmentRepo(cache, output, {}).process(PARCHMENT, "2022.08.07-1.18.2")

    assert [o.artifact.path for o in outputs] == [
        "net/minecraft/mappings_parchment/2022.08.07-1.18.2/mappings_parchment-2022.08.07-1.18.2-metadata.json",
        "net/minecraft/mappings_parchment/2022.08.07-1.18.2/mappings_parchment-2022.08.07-1.18.2.pom",
    ]
    for o in outputs:
        assert verify_hash(o.file)

    data = json.loads(outputs[0].file.read_text(encoding="utf-8"))
    assert data["timestamp"] == "2022.08.07"
    assert data["minecraft"] == "1.18.2"
    assert data["mapping_minecraft"] == "1.18.2"
    assert data["upstream"] == "org.parchmentmc.data:parchment-1.18.2:2022.08.07:checked@zip"

    pom = outputs[1].file.read_text(encoding="utf-8")
    assert "<artifactId>parchment-1.18.2</artifactId>" in pom


def test_parchment_keeps_explicit_mapping_version(cache, output):
    outputs = ParchmentRepo(cache, output, {}).process(PARCHMENT, "1.18.2-2022.08.07-1.19.1")

    assert outputs[0].artifact.version == "1.18.2-2022.08.07-1.19.1"
    data = json.loads(outputs[0].file.read_text(encoding="utf-8"))
    assert data["mapping_minecraft"] == "1.18.2"
    assert data["minecraft"] == "1.19.1"


def test_parchment_fills_minecraft_from_config(cache, output):
    params = {"parchment": {"minecraft": "1.19.2"}}
    outputs = ParchmentRepo(cache, output, params).process(PARCHMENT, "2022.08.07")

    assert outputs[0].artifact.version == "2022.08.07-1.19.2"


def test_parchment_requires_minecraft(cache, output):
    with pytest.raises(InvalidVersionError):
        ParchmentRepo(cache, output, {}).process(PARCHMENT, "2022.08.07")


def test_parchment_rejects_snapshots(cache, output):
    with pytest.raises(InvalidVersionError):
        ParchmentRepo(cache, output, {}).process(PARCHMENT, "2025.10.05-nightly-SNAPSHOT")
    assert not output.exists()


@pytest.mark.parametrize(
    "version",
    ["2026.01.01-1.12/../../../../../escaped", "../../escaped-2026.01.01-1.12"],
)
def test_parchment_rejects_path_like_versions(cache, output, tmp_path, version):
    with pytest.raises(InvalidVersionError):
        ParchmentRepo(cache, output, {}).process(PARCHMENT, version)
    assert not output.exists()
    assert list(tmp_path.rglob("*escaped*")) == []


def test_local_artifact_naming():
    base = Artifact("com.example", "toolkit", "1.0")
    assert artifact_for(base, Path("toolkit.jar")).descriptor == "com.example:toolkit:1.0"
    assert artifact_for(base, Path("toolkit-sources.jar")).descriptor == "com.example:toolkit:1.0:sources"
    assert artifact_for(base, Path("natives-linux.zip")).descriptor == "com.example:toolkit:1.0:natives-linux@zip"


@pytest.fixture
def local_params(tmp_path):
    source = tmp_path / "prebuilt" / "toolkit"
    source.mkdir(parents=True)
    (source / "toolkit.jar").write_bytes(b"main jar")
    (source / "toolkit-sources.jar").write_bytes(b"sources jar")
    (source / ".DS_Store").write_bytes(b"ignored")
    return {"local": {"com.example:toolkit": {"source_dir": str(source), "description": "Toolkit"}}}


def test_local_handles_only_configured_modules(local_params):
    assert LocalRepo.handles("com.example:toolkit", local_params)
    assert not LocalRepo.handles("com.example:other", local_params)


def test_local_publishes_files_and_pom(cache, output, local_params):
    outputs = LocalRepo(cache, output, local_params).process("com.example:toolkit", "1.0")

    descriptors = sorted(o.artifact.descriptor for o in outputs)
    assert descriptors == [
        "com.example:toolkit:1.0",
        "com.example:toolkit:1.0:sources",
        "com.example:toolkit:1.0@pom",
    ]
    jar = output / "com/example/toolkit/1.0/toolkit-1.0.jar"
    assert jar.read_bytes() == b"main jar"
    assert verify_hash(jar)
    assert "<description>Toolkit</description>" in (output / "com/example/toolkit/1.0/toolkit-1.0.pom").read_text(
        encoding="utf-8"
    )


def test_local_prefers_versioned_directory(cache, output, local_params):
    source = Path(local_params["local"]["com.example:toolkit"]["source_dir"])
    versioned = source / "2.0"
    versioned.mkdir()
    (versioned / "toolkit.jar").write_bytes(b"v2 jar")
    (versioned / "toolkit.pom").write_text("<project/>", encoding="utf-8")

    outputs = LocalRepo(cache, output, local_params).process("com.example:toolkit", "2.0")

    assert len(outputs) == 2
    assert (output / "com/example/toolkit/2.0/toolkit-2.0.jar").read_bytes() == b"v2 jar"
    assert (output / "com/example/toolkit/2.0/toolkit-2.0.pom").read_text(encoding="utf-8") == "<project/>"


def test_local_second_run_reuses_cache(cache, output, local_params, monkeypatch):
    LocalRepo(cache, output, local_params).process("com.example:toolkit", "1.0")

    import modmaven.repos.local as local_mod

    def no_copy(*args, **kwargs):
        raise AssertionError("copy task should have been served from the cache")

    monkeypatch.setattr(local_mod.shutil, "copyfile", no_copy)
    outputs = LocalRepo(cache, output, local_params).process("com.example:toolkit", "1.0")
    assert len(outputs) == 3


def test_local_skips_checksum_sidecars(cache, output, local_params):
    source = Path(local_params["local"]["com.example:toolkit"]["source_dir"])
    (source / "toolkit.jar.sha1").write_text("0" * 40, encoding="utf-8")
    (source / "toolkit.jar.md5").write_text("0" * 32, encoding="utf-8")

    outputs = LocalRepo(cache, output, local_params).process("com.example:toolkit", "1.0")

    assert len(outputs) == 3
    assert not any("sha1" in o.artifact.descriptor or "md5" in o.artifact.descriptor for o in outputs)
    assert verify_hash(output / "com/example/toolkit/1.0/toolkit-1.0.jar")


def test_local_missing_source_dir(cache, output, tmp_path):
    params = {"local": {"com.example:toolkit": {"source_dir": str(tmp_path / "nope")}}}

    with pytest.raises(SourceNotFoundError) as info:
        LocalRepo(cache, output, params).process("com.example:toolkit", "1.0")
    assert isinstance(info.value, FileNotFoundError)
    assert not info.value.retryable


def test_local_empty_source_dir(cache, output, tmp_path):
    source = tmp_path / "empty"
    source.mkdir()
    (source / "toolkit.jar.sha1").write_text("0" * 40, encoding="utf-8")
    params = {"local": {"com.example:toolkit": {"source_dir": str(source)}}}

    with pytest.raises(SourceNotFoundError):
        LocalRepo(cache, output, params).process("com.example:toolkit", "1.0")
