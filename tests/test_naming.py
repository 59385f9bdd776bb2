from pathlib import Path

from uploader import naming
from uploader.model import NameStrategy
from uploader.naming import TOKEN_ALPHABET, TOKEN_LENGTH, directory_lock, random_token, resolve_name


def test_free_name_is_kept(tmp_path: Path):
    assert resolve_name("a", "png", tmp_path) == "a"


def test_collision_appends_counter_starting_at_one(tmp_path: Path):
    (tmp_path / "a.png").write_bytes(b"x")
    assert resolve_name("a", "png", tmp_path) == "a-1"


def test_counter_skips_taken_suffixes(tmp_path: Path):
    for name in ("a.png", "a-1.png", "a-2.png"):
        (tmp_path / name).write_bytes(b"x")
    assert resolve_name("a", "png", tmp_path) == "a-3"


def test_other_extension_does_not_collide(tmp_path: Path):
    (tmp_path / "a.jpg").write_bytes(b"x")
    assert resolve_name("a", "png", tmp_path) == "a"


def test_empty_extension(tmp_path: Path):
    (tmp_path / "README").write_text("x")
    assert resolve_name("README", "", tmp_path) == "README-1"


def test_claimed_paths_count_as_taken(tmp_path: Path):
    claimed = {tmp_path / "a.png", tmp_path / "a-1.png"}
    assert resolve_name("a", "png", tmp_path, claimed=claimed) == "a-2"


def test_random_token_shape():
    token = random_token()
    assert len(token) == TOKEN_LENGTH
    assert set(token) <= set(TOKEN_ALPHABET)


def test_random_strategy_ignores_base_name(tmp_path: Path):
    name = resolve_name("holiday", "jpg", tmp_path, NameStrategy.RANDOM)
    assert name != "holiday"
    assert len(name) == TOKEN_LENGTH


def test_random_strategy_redraws_on_collision(tmp_path: Path, monkeypatch):
    taken = "a" * TOKEN_LENGTH
    free = "b" * TOKEN_LENGTH
    (tmp_path / f"{taken}.jpg").write_bytes(b"x")
    tokens = iter([taken, free])
    monkeypatch.setattr(naming, "random_token", lambda: next(tokens))
    assert resolve_name("x", "jpg", tmp_path, NameStrategy.RANDOM) == free


def test_directory_lock_is_shared_per_directory(tmp_path: Path):
    other = tmp_path / "other"
    other.mkdir()
    assert directory_lock(tmp_path) is directory_lock(str(tmp_path))
    assert directory_lock(tmp_path) is not directory_lock(other)
