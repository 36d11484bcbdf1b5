from wikicontent.services.diff import ChangeStats, calculate_diff, change_stats, content_hash


def test_content_hash_is_sha256_hex():
    assert content_hash("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_content_hash_treats_none_as_empty():
    assert content_hash(None) == content_hash("")


def test_diff_of_equal_content_is_empty():
    assert calculate_diff("same\ntext", "same\ntext") == ""
    assert calculate_diff(None, "") == ""


def test_diff_is_unified_with_labels():
    diff = calculate_diff("line one\nline two", "line one\nline 2")
    lines = diff.splitlines()
    assert lines[0] == "--- original"
    assert lines[1] == "+++ modified"
    assert "-line two" in lines
    assert "+line 2" in lines


def test_change_stats_counts_lines_and_chars():
    assert change_stats("a\nb", "a\nc") == ChangeStats(added_lines=1, deleted_lines=1, changed_chars=1)


def test_change_stats_from_nothing():
    stats = change_stats(None, "one\ntwo\nthree")
    assert stats.added_lines == 3
    assert stats.deleted_lines == 0
    assert stats.changed_chars == len("one\ntwo\nthree")
