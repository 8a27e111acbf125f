import pytest

from codebridge.index import ContentIndex, IndexNotInitializedError
from codebridge.spec import ContentIndexProtocol, ElementKind
from codebridge.test_utils import make_element


def _batch(count: int, prefix: str = "func"):
    return [
        make_element(f"{prefix}_{i}", body=f"def {prefix}_{i}():\n    return {i}")
        for i in range(count)
    ]


def test_append_requires_init(tmp_path):
    index = ContentIndex(tmp_path / "store" / "codebase.jsonl")

    with pytest.raises(IndexNotInitializedError):
        index.append(_batch(1))


def test_init_creates_parent_directory(tmp_path):
    index = ContentIndex(tmp_path / "deep" / "dir" / "codebase.jsonl")

    index.init()
    index.init()  # idempotent

    assert (tmp_path / "deep" / "dir").is_dir()
    assert index.read_all() == []


def test_same_batch_twice_is_stored_once(index):
    batch = _batch(20)

    assert index.append(batch) == 20
    assert index.append(batch) == 0

    assert index.stats().total_elements == 20


def test_duplicates_within_one_batch_are_dropped(index):
    element = make_element("dup")

    assert index.append([element, element]) == 1
    assert len(index.read_all()) == 1


def test_same_content_in_two_files_keeps_first(index):
    first = make_element("shared", file="a.py")
    second = make_element("shared", file="b.py")

    index.append([first])
    index.append([second])

    assert index.find_by_file("a.py") == [first]
    assert index.find_by_file("b.py") == []


def test_round_trip_is_field_for_field_equal(index):
    batch = _batch(3)
    index.append(batch)

    assert index.read_all() == batch


def test_missing_store_reads_as_empty(tmp_path):
    index = ContentIndex(tmp_path / "nothing.jsonl")

    assert index.read_all() == []
    assert index.search(lambda e: True) == []
    assert index.stats().total_elements == 0


def test_malformed_and_truncated_lines_are_skipped(index):
    index.append(_batch(2))
    with index.index_path.open("a", encoding="utf-8") as f:
        f.write("not json at all\n")
        f.write("\n")
        f.write('{"type": "function", "name": "half')

    assert [e.name for e in index.read_all()] == ["func_0", "func_1"]


def test_append_after_truncated_tail_starts_a_new_line(tmp_path):
    path = tmp_path / "codebase.jsonl"
    writer = ContentIndex(path)
    writer.init()
    first = make_element("a")
    writer.append([first])
    with path.open("a", encoding="utf-8") as f:
        f.write('{"type": "function", "name": "half')

    reopened = ContentIndex(path)
    reopened.init()
    second = make_element("b")

    assert reopened.append([second]) == 1
    assert reopened.read_all() == [first, second]
    assert reopened.exists(second.content_hash)
    assert path.read_bytes().endswith(b"\n")


def test_search_returns_matches_in_store_order(index):
    batch = _batch(6)
    index.append(batch)

    def predicate(e):
        return int(e.name.split("_")[1]) % 2 == 0

    assert index.search(predicate) == [e for e in index.read_all() if predicate(e)]
    assert [e.name for e in index.search(predicate)] == ["func_0", "func_2", "func_4"]


def test_find_helpers(index):
    cls = make_element(
        "Widget", body="class Widget:\n    pass", kind=ElementKind.CLASS, file="w.py"
    )
    fn = make_element("build", file="w.py")
    other = make_element("other", file="x.py")
    index.append([cls, fn, other])

    assert index.find_by_name("Widget") == [cls]
    assert index.find_by_name("widget") == []
    assert index.find_by_kind(ElementKind.CLASS) == [cls]
    assert index.find_by_kind("function") == [fn, other]
    assert index.find_by_file("w.py") == [cls, fn]


def test_search_text_matches_name_or_body_case_insensitively(index):
    index.append(
        [
            make_element("generateQwenCommitMessage"),
            make_element("generateClaudeCommitMessage"),
            make_element("generateSummary"),
            make_element(
                "render", body="def render():\n    return build_commit_message()"
            ),
        ]
    )

    names = [e.name for e in index.search_text("commitmessage")]
    assert names == ["generateQwenCommitMessage", "generateClaudeCommitMessage"]

    body_hits = [e.name for e in index.search_text("BUILD_COMMIT")]
    assert body_hits == ["render"]


def test_exists_tracks_appended_hashes(index):
    element = make_element("f")

    assert not index.exists(element.content_hash)
    index.append([element])
    assert index.exists(element.content_hash)


def test_init_reloads_hashes_from_existing_store(tmp_path):
    path = tmp_path / "codebase.jsonl"
    writer = ContentIndex(path)
    writer.init()
    writer.append(_batch(5))

    reader = ContentIndex(path)
    reader.init()

    assert all(reader.exists(e.content_hash) for e in _batch(5))
    assert reader.append(_batch(5)) == 0
    assert reader.append(_batch(6)) == 1


def test_each_instance_owns_its_cache(tmp_path):
    first = ContentIndex(tmp_path / "one.jsonl")
    second = ContentIndex(tmp_path / "two.jsonl")
    first.init()
    second.init()
    element = make_element("f")

    first.append([element])

    assert first.exists(element.content_hash)
    assert not second.exists(element.content_hash)
    assert second.append([element]) == 1


def test_stats_aggregates_by_kind_language_and_file(index):
    index.append(
        [
            make_element("a", body="def a(): pass", file="x.py"),
            make_element("b", body="def b(): pass", file="y.py"),
            make_element(
                "C", body="class C: é", kind=ElementKind.CLASS, file="x.py"
            ),
        ]
    )

    stats = index.stats()

    assert stats.total_elements == 3
    assert stats.by_kind == {"function": 2, "class": 1}
    assert stats.by_language == {"python": 3}
    assert stats.by_file == {"x.py": 2, "y.py": 1}
    # Body size is counted in UTF-8 bytes
    assert stats.total_body_bytes == 13 + 13 + len("class C: é".encode("utf-8"))


def test_clear_removes_store_and_forgets_hashes(index):
    element = make_element("f")
    index.append([element])

    index.clear()

    assert not index.index_path.exists()
    assert not index.exists(element.content_hash)
    assert index.read_all() == []
    with pytest.raises(IndexNotInitializedError):
        index.append([element])

    index.init()
    assert index.append([element]) == 1


def test_clear_without_store_is_harmless(tmp_path):
    index = ContentIndex(tmp_path / "absent.jsonl")
    index.clear()
    assert index.read_all() == []


def test_rebuild_collapses_duplicates_keeping_first_seen(tmp_path):
    index = ContentIndex(tmp_path / "codebase.jsonl", deduplication=False)
    index.init()
    original = make_element("f", file="first.py")
    copy = make_element("f", file="second.py")
    other = make_element("g")

    assert index.append([original, other]) == 2
    assert index.append([copy, other]) == 2
    assert index.stats().total_elements == 4

    survivors = index.rebuild()

    assert survivors == 2
    assert index.read_all() == [original, other]


def test_rebuild_is_idempotent(tmp_path):
    index = ContentIndex(tmp_path / "codebase.jsonl", deduplication=False)
    index.init()
    batch = _batch(4)
    index.append(batch)
    index.append(batch[:2])
    distinct = len({e.content_hash for e in index.read_all()})

    assert index.rebuild() == distinct
    after_first = index.index_path.read_bytes()
    assert index.rebuild() == distinct
    assert index.index_path.read_bytes() == after_first


def test_rebuild_of_empty_store(index):
    assert index.rebuild() == 0
    assert index.read_all() == []
    assert index.initialized


def test_non_dedup_mode_still_records_hashes(tmp_path):
    index = ContentIndex(tmp_path / "codebase.jsonl", deduplication=False)
    index.init()
    element = make_element("f")

    index.append([element])
    index.append([element])

    assert index.exists(element.content_hash)
    assert len(index.read_all()) == 2


def test_rag_index_groups_store_contents(index):
    index.append(_batch(3))

    rag = index.rag_index()

    assert rag.total_elements == 3
    assert list(rag.by_kind) == ["function"]


def test_content_index_satisfies_protocol(index):
    assert isinstance(index, ContentIndexProtocol)
