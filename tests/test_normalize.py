import pytest

from uploader.errors import NoFilesSubmitted
from uploader.normalize import is_submitted, normalize_submission


def test_scalar_form_yields_one_entry():
    submission = {"avatar": {"name": "me.png", "type": "image/png", "tmp_name": "/tmp/php1", "error": 0, "size": 10}}
    entries = normalize_submission(submission, "avatar")
    assert len(entries) == 1
    assert entries[0].declared_name == "me.png"
    assert entries[0].temporary_path == "/tmp/php1"
    assert entries[0].size_bytes == 10


def test_single_index_sequence_yields_one_entry():
    submission = {"files": {"name": ["a.txt"], "type": ["text/plain"], "tmp_name": ["/tmp/p"], "error": [0], "size": [3]}}
    entries = normalize_submission(submission, "files")
    assert [e.declared_name for e in entries] == ["a.txt"]


def test_empty_slots_are_skipped_and_order_kept():
    submission = {"files": {
        "name": ["a.txt", "", "b.txt", "", "c.txt"],
        "type": ["text/plain", "", "text/plain", "", "text/plain"],
        "tmp_name": ["/t/1", "", "/t/2", "", "/t/3"],
        "error": [0, 4, 0, 4, 0],
        "size": [1, 0, 2, 0, 3],
    }}
    entries = normalize_submission(submission, "files")
    assert [e.declared_name for e in entries] == ["a.txt", "b.txt", "c.txt"]
    assert [e.size_bytes for e in entries] == [1, 2, 3]
    assert [e.temporary_path for e in entries] == ["/t/1", "/t/2", "/t/3"]


def test_single_non_empty_slot_among_empty_ones():
    submission = {"files": {"name": ["", "only.txt"], "type": ["", "text/plain"],
                            "tmp_name": ["", "/t/1"], "error": [4, 0], "size": [0, 5]}}
    entries = normalize_submission(submission, "files")
    assert len(entries) == 1
    assert entries[0].declared_name == "only.txt"


def test_numeric_strings_are_coerced():
    submission = {"f": {"name": "x.bin", "type": "", "tmp_name": "/t", "error": "0", "size": "2048"}}
    entry = normalize_submission(submission, "f")[0]
    assert entry.size_bytes == 2048
    assert entry.host_error_code == 0


def test_missing_attributes_default():
    entry = normalize_submission({"f": {"name": "x.bin"}}, "f")[0]
    assert entry.declared_mime_type == ""
    assert entry.temporary_path == ""
    assert entry.size_bytes == 0


@pytest.mark.parametrize("submission", [
    {},
    {"other": {"name": "a.txt"}},
    {"files": {"name": ""}},
    {"files": {"name": []}},
    {"files": {"name": ["", ""]}},
])
def test_nothing_submitted_raises(submission):
    assert not is_submitted(submission, "files")
    with pytest.raises(NoFilesSubmitted):
        normalize_submission(submission, "files")


def test_is_submitted():
    assert is_submitted({"files": {"name": ["a"]}}, "files")
    assert is_submitted({"files": {"name": "a"}}, "files")


def test_missing_field_names_the_field():
    with pytest.raises(NoFilesSubmitted, match="avatar is missing"):
        normalize_submission({"files": {"name": "a.txt"}}, "avatar")
