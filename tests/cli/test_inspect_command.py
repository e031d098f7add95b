"""Tests for the inspect command."""

import json

import pytest


@pytest.fixture
def concat_spec(write_spec):
    return write_spec(
        {
            "@type": "concat",
            "sources": [
                {
                    "spec": {"@type": "ndjson", "path": "a.ndjson"},
                    "estimated_size_bytes": 10,
                    "is_infinite": False,
                    "does_not_need_splitting": True,
                },
                {
                    "spec": {"@type": "parquet"},
                    "estimated_size_bytes": 20,
                    "is_infinite": False,
                    "encoding": {"@type": "json"},
                },
            ],
        }
    )


def test_inspect_json(invoke, concat_spec):
    """JSON output lists sub-sources and the combined metadata."""
    res = invoke(["inspect", concat_spec, "--format", "json"])

    assert res.exit_code == 0, res.stderr
    data = json.loads(res.stdout)
    assert data["type"] == "concat"
    assert [s["type"] for s in data["sources"]] == ["ndjson", "parquet"]
    assert [s["registered"] for s in data["sources"]] == [True, False]
    assert data["sources"][1]["codec"] == {"@type": "json"}
    assert data["metadata"] == {
        "produces_sorted_keys": None,
        "is_infinite": False,
        "estimated_size_bytes": 30,
    }
    assert data["does_not_need_splitting"] is None


def test_inspect_text(invoke, concat_spec):
    """Text output is the default."""
    res = invoke(["inspect", concat_spec])

    assert res.exit_code == 0
    assert "Source: concat" in res.stdout
    assert "Sub-sources (2):" in res.stdout
    assert "[0] ndjson" in res.stdout
    assert "[1] parquet  [unregistered]" in res.stdout
    assert "size=10 infinite=false sorted=? no_split=true" in res.stdout
    assert "Estimated Size Bytes: 30" in res.stdout


def test_inspect_does_not_open_readers(invoke, concat_spec, recording_factory):
    """Inspecting a spec never builds a reader, so missing files are fine."""
    res = invoke(["inspect", concat_spec, "--format", "json"])

    assert res.exit_code == 0
    assert recording_factory.calls == []


def test_inspect_empty_concat(invoke, write_spec):
    """An empty list composes to zero size, finite, sorted."""
    res = invoke(["inspect", write_spec({"@type": "concat"}), "--format", "json"])

    data = json.loads(res.stdout)
    assert data["sources"] == []
    assert data["metadata"]["estimated_size_bytes"] == 0
    assert data["does_not_need_splitting"] is True


def test_inspect_leaf_spec(invoke, write_spec):
    """Non-concat specs only report their type."""
    res = invoke(["inspect", write_spec({"@type": "in_memory", "elements": []})])

    assert res.exit_code == 0
    assert res.stdout.strip() == "Source: in_memory"


def test_inspect_bad_entry(invoke, write_spec):
    """Wrong-shaped fields are reported with their location."""
    spec = write_spec(
        {"@type": "concat", "sources": [{"spec": {"@type": "x"}, "is_infinite": "yes"}]}
    )
    res = invoke(["inspect", spec])

    assert res.exit_code == 1
    assert "sources[0]" in res.stderr
    assert "is_infinite" in res.stderr


def test_inspect_invalid_format_option(invoke, concat_spec):
    """Click rejects unknown formats."""
    res = invoke(["inspect", concat_spec, "--format", "yaml"])

    assert res.exit_code == 2
    assert "Invalid value" in res.stderr
