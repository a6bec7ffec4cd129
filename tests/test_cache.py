from modmaven.cache import Cache, compute_task_hash, file_digest, update_hash, verify_hash


def test_miss_then_hit(cache: Cache, make_file):
    assert cache.get("abc123") is None

    source = make_file("result.txt", "hello")
    stored = cache.put("abc123", source)

    assert stored != source
    assert cache.get("abc123") == stored
    assert stored.read_text(encoding="utf-8") == "hello"


def test_last_write_wins(cache: Cache, make_file):
    cache.put("k1", make_file("a.txt", "first"))
    cache.put("k1", make_file("b.txt", "second"))

    hit = cache.get("k1")
    assert hit.name == "b.txt"
    assert hit.read_text(encoding="utf-8") == "second"


def test_tampered_entry_is_invalid(cache: Cache, make_file):
    stored = cache.put("k2", make_file("a.txt", "original"))
    stored.write_text("changed", encoding="utf-8")

    assert cache.get("k2") is None


def test_missing_sidecar_is_invalid(cache: Cache, make_file):
    stored = cache.put("k3", make_file("a.txt", "data"))
    stored.with_name(stored.name + ".hash").unlink()

    assert cache.get("k3") is None


def test_clear(cache: Cache, make_file):
    cache.put("k4", make_file("a.txt", "data"))
    cache.clear("k4")
    assert cache.get("k4") is None
    assert not cache.entry_dir("k4").exists()


def test_task_hash_follows_input_content(make_file):
    source = make_file("input.txt", "one")
    first = compute_task_hash("copy", [source], {"x": 1})
    assert compute_task_hash("copy", [source], {"x": 1}) == first
    assert compute_task_hash("copy", [source], {"x": 2}) != first
    assert compute_task_hash("other", [source], {"x": 1}) != first

    source.write_text("two", encoding="utf-8")
    assert compute_task_hash("copy", [source], {"x": 1}) != first


def test_hash_sidecar(make_file):
    f = make_file("artifact.jar", "bytes")
    digest = update_hash(f)

    sidecar = f.with_name("artifact.jar.sha1")
    assert sidecar.read_text(encoding="utf-8") == digest == file_digest(f, "sha1")
    assert verify_hash(f)

    f.write_text("other bytes", encoding="utf-8")
    assert not verify_hash(f)
    assert not verify_hash(f, "sha256")


def test_file_named_like_a_sidecar(cache: Cache, make_file):
    stored = cache.put("k5", make_file("result.hash", "payload"))

    assert stored.name == "result.hash"
    assert cache.get("k5") == stored
    assert stored.with_name("result.hash.hash").is_file()
