import os
from pathlib import Path

from dotdep.actions.remove import remove
from dotdep.actions.symlink import symlink
from dotdep.models import ActionStatus


def _source(tmp_path: Path, name: str = "source.txt") -> Path:
    source = tmp_path / name
    source.write_text("source", encoding="utf-8")
    return source


async def test_creates_symlink(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "link"
    action = symlink(str(source), str(dest))

    plan = await action.plan()
    assert plan.status == ActionStatus.SUCCESS
    assert not os.path.lexists(dest)

    result = await action.apply()
    assert result.status == ActionStatus.SUCCESS
    assert dest.is_symlink()
    assert os.readlink(dest) == str(source)


async def test_creates_missing_parent_directories(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "a" / "b" / "link"

    result = await symlink(str(source), str(dest)).apply()

    assert result.status == ActionStatus.SUCCESS
    assert dest.read_text(encoding="utf-8") == "source"


async def test_links_directories(tmp_path: Path) -> None:
    source = tmp_path / "config.d"
    source.mkdir()
    (source / "a.conf").write_text("a", encoding="utf-8")
    dest = tmp_path / "link.d"

    assert (await symlink(str(source), str(dest)).apply()).status == ActionStatus.SUCCESS
    assert (dest / "a.conf").read_text(encoding="utf-8") == "a"


async def test_skips_when_already_correct(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "link"
    os.symlink(source, dest)
    before = os.lstat(dest)
    action = symlink(str(source), str(dest))

    plan = await action.plan()
    assert plan.status == ActionStatus.SKIP
    assert plan.detail == "Symlink already exists and is correct."

    result = await action.apply()
    assert result.status == ActionStatus.SKIP
    after = os.lstat(dest)
    assert (after.st_ino, after.st_mtime_ns) == (before.st_ino, before.st_mtime_ns)


async def test_skips_when_link_chain_resolves_to_source(tmp_path: Path) -> None:
    source = _source(tmp_path)
    hop = tmp_path / "hop"
    os.symlink(source, hop)
    dest = tmp_path / "link"
    os.symlink(hop, dest)

    assert (await symlink(str(source), str(dest)).apply()).status == ActionStatus.SKIP
    assert os.readlink(dest) == str(hop)


async def test_fails_when_source_missing(tmp_path: Path) -> None:
    dest = tmp_path / "link"
    action = symlink(str(tmp_path / "missing"), str(dest))

    plan = await action.plan()
    assert plan.status == ActionStatus.ERROR
    assert plan.detail == f"Source not found: {tmp_path / 'missing'}"

    assert (await action.apply()).status == ActionStatus.ERROR
    assert not os.path.lexists(dest)


async def test_fails_when_destination_exists_without_overwrite(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "existing.txt"
    dest.write_text("existing", encoding="utf-8")
    action = symlink(str(source), str(dest))

    plan = await action.plan()
    assert plan.status == ActionStatus.ERROR
    assert plan.detail == (
        f"Destination already exists and is not the correct symlink: {dest}"
    )

    assert (await action.apply()).status == ActionStatus.ERROR
    assert not dest.is_symlink()
    assert dest.read_text(encoding="utf-8") == "existing"


async def test_dangling_destination_counts_as_existing(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "link"
    os.symlink(tmp_path / "gone", dest)

    assert (await symlink(str(source), str(dest)).plan()).status == ActionStatus.ERROR

    result = await symlink(str(source), str(dest), overwrite=True).apply()
    assert result.status == ActionStatus.SUCCESS
    assert os.readlink(dest) == str(source)


async def test_overwrites_file(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "existing.txt"
    dest.write_text("existing", encoding="utf-8")

    result = await symlink(str(source), str(dest), overwrite=True).apply()

    assert result.status == ActionStatus.SUCCESS
    assert dest.is_symlink()
    assert dest.read_text(encoding="utf-8") == "source"


async def test_overwrites_directory(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "dir"
    (dest / "nested").mkdir(parents=True)

    result = await symlink(str(source), str(dest), overwrite=True).apply()

    assert result.status == ActionStatus.SUCCESS
    assert dest.is_symlink()


async def test_overwrites_link_pointing_elsewhere_without_touching_target(
    tmp_path: Path,
) -> None:
    source = _source(tmp_path)
    other_dir = tmp_path / "other"
    other_dir.mkdir()
    (other_dir / "keep.txt").write_text("keep", encoding="utf-8")
    dest = tmp_path / "link"
    os.symlink(other_dir, dest)

    result = await symlink(str(source), str(dest), overwrite=True).apply()

    assert result.status == ActionStatus.SUCCESS
    assert os.readlink(dest) == str(source)
    assert (other_dir / "keep.txt").exists()


async def test_relative_source_resolves_against_cwd(tmp_path: Path, monkeypatch) -> None:
    source = _source(tmp_path)
    monkeypatch.chdir(tmp_path)

    result = await symlink("source.txt", "links/link").apply()

    assert result.status == ActionStatus.SUCCESS
    assert os.readlink(tmp_path / "links" / "link") == str(source)


async def test_expands_home(isolated_home: Path) -> None:
    dotfiles = isolated_home / "dotfiles"
    dotfiles.mkdir()
    (dotfiles / ".bashrc").write_text("export A=1", encoding="utf-8")

    result = await symlink("~/dotfiles/.bashrc", "~/.bashrc").apply()

    assert result.status == ActionStatus.SUCCESS
    assert os.readlink(isolated_home / ".bashrc") == str(dotfiles / ".bashrc")


def test_revert_action_is_non_recursive_remove_of_destination() -> None:
    action = symlink("~/dotfiles/.bashrc", "~/.bashrc", overwrite=True)

    assert action.get_revert_action() == remove("~/.bashrc", recursive=False)


async def test_revert_round_trip(tmp_path: Path) -> None:
    source = _source(tmp_path)
    dest = tmp_path / "link"
    action = symlink(str(source), str(dest))

    assert (await action.apply()).status == ActionStatus.SUCCESS
    revert = action.get_revert_action()
    assert (await revert.plan()).status == ActionStatus.SUCCESS
    assert (await revert.apply()).status == ActionStatus.SUCCESS

    assert not os.path.lexists(dest)
    assert source.read_text(encoding="utf-8") == "source"


async def test_revert_of_directory_link_keeps_directory(tmp_path: Path) -> None:
    source = tmp_path / "config.d"
    source.mkdir()
    (source / "a.conf").write_text("a", encoding="utf-8")
    dest = tmp_path / "link.d"
    action = symlink(str(source), str(dest))

    await action.apply()
    assert (await action.get_revert_action().apply()).status == ActionStatus.SUCCESS

    assert not os.path.lexists(dest)
    assert (source / "a.conf").exists()


def test_title() -> None:
    assert symlink("a", "b").title == "Symlink: a -> b"
