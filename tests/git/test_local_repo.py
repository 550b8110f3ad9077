"""Operations against a real git client and a local origin repository."""

import pytest

from gitle.git import operations
from gitle.git.operations import RefreshAction, check_update
from gitle.model import UpdatePolicy, https
from gitle.orchestrator import refresh

DEP = https("example.com/user/repository")


@pytest.fixture
def add_commit(git_cli):
    def commit(repo, name):
        (repo / name).write_text(f"{name}\n")
        git_cli("add", name, cwd=repo)
        git_cli("commit", "-q", "-m", name, cwd=repo)

    return commit


@pytest.mark.short
def test_clone_and_status(ctx, local_clone_url, online, add_commit):
    operations.clone(ctx, DEP)

    folder = ctx.folder_for(DEP)
    assert (folder / "README.md").read_text() == "first\n"
    assert operations.is_up_to_date(ctx, DEP) is True

    add_commit(local_clone_url, "second.txt")
    assert operations.is_up_to_date(ctx, DEP) is False


@pytest.mark.short
def test_out_of_date_clone_is_pulled(ctx, local_clone_url, online, add_commit):
    dep = https("example.com/user/repository", update_policy=UpdatePolicy.IF_OUT_OF_DATE)
    operations.clone(ctx, dep)
    add_commit(local_clone_url, "second.txt")

    assert check_update(ctx, dep) is RefreshAction.updated
    assert (ctx.folder_for(dep) / "second.txt").exists()
    assert check_update(ctx, dep) is RefreshAction.up_to_date


@pytest.mark.short
def test_pinned_tag_is_a_sibling(ctx, local_clone_url, online, add_commit):
    pinned = https("example.com/user/repository", checkout="v1")
    add_commit(local_clone_url, "second.txt")

    operations.clone(ctx, DEP)
    operations.clone(ctx, pinned)

    default_folder = ctx.folder_for(DEP)
    pinned_folder = ctx.folder_for(pinned)
    assert default_folder.parent == pinned_folder.parent
    assert (default_folder / "second.txt").exists()
    assert not (pinned_folder / "second.txt").exists()


@pytest.mark.short
def test_pinned_tag_updates_without_pull(
    ctx, local_clone_url, online, add_commit, git_cli
):
    pinned = https("example.com/user/repository", checkout="v1")
    operations.clone(ctx, pinned)
    add_commit(local_clone_url, "second.txt")

    operations.update(ctx, pinned)

    folder = ctx.folder_for(pinned)
    assert git_cli("describe", "--tags", cwd=folder) == "v1"
    assert not (folder / "second.txt").exists()


@pytest.mark.short
def test_bad_ref_fails_checkout(ctx, local_clone_url, online):
    from gitle.errors import CheckoutFailedError

    with pytest.raises(CheckoutFailedError):
        operations.clone(ctx, https("example.com/user/repository", checkout="nope"))


@pytest.mark.short
def test_refresh_pass(ctx, local_clone_url, online):
    ctx.registry.add(DEP)

    first = refresh(ctx)
    second = refresh(ctx)

    assert first.count(RefreshAction.cloned) == 1
    assert second.count(RefreshAction.up_to_date) == 1
    assert first.ok and second.ok
