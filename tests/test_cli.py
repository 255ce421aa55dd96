"""Tests for the sync-client command line interface."""

from unittest import mock

import pytest
from typer.testing import CliRunner

from sync_client.api.error_handling import ResourceNotFoundError
from sync_client.cli import app
from sync_client.core.dependencies import DependencyContainer
from sync_client.data.models import JobState, RemoteConfig
from sync_client.data.storage.kv_store import InMemoryStore

from conftest import make_entry, make_status

runner = CliRunner()


@pytest.fixture
def patched_container(backend):
    """Route every CLI command to an in-memory container around the fake backend."""

    def build(**kwargs):
        return DependencyContainer(
            base_url=kwargs.get("base_url"),
            store=InMemoryStore(),
            backend=backend,
            configure_logging=False,
        )

    with mock.patch("sync_client.cli.DependencyContainer", side_effect=build) as factory:
        yield factory


def test_remotes(patched_container, backend):
    """Test listing configured remotes."""
    backend.list_configs.return_value = [RemoteConfig("nas", "webdav"), RemoteConfig("s3", "s3")]

    result = runner.invoke(app, ["remotes"])

    assert result.exit_code == 0
    assert "nas  (webdav)" in result.stdout
    assert "s3  (s3)" in result.stdout


def test_server_option_is_forwarded(patched_container, backend):
    """Test that --server reaches the container."""
    backend.list_configs.return_value = []

    result = runner.invoke(app, ["--server", "http://other:9000", "remotes"])

    assert result.exit_code == 0
    assert patched_container.call_args.kwargs["base_url"] == "http://other:9000"
    assert "No configurations found." in result.stdout


def test_ls_remote(patched_container, backend):
    """Test listing folders of a remote directory."""
    backend.list_remote_files.return_value = [
        make_entry("photos", "/media"),
        make_entry("readme.txt", "/media", is_directory=False, size=10),
    ]

    result = runner.invoke(app, ["ls-remote", "nas", "/media"])

    assert result.exit_code == 0
    assert "Root / media" in result.stdout
    assert "photos" in result.stdout
    assert "readme.txt" not in result.stdout
    backend.list_remote_files.assert_awaited_once_with("nas", "/media")


def test_ls_local_sorts_folders_first(patched_container, backend):
    """Test local listings show folders before files."""
    backend.list_local_files.return_value = [
        make_entry("b.txt", "/mnt/home", is_directory=False, size=2048),
        make_entry("a-folder", "/mnt/home"),
    ]

    result = runner.invoke(app, ["ls-local", "/mnt/home"])

    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines[0].endswith("a-folder")
    assert "2 KB" in lines[1]


def test_sync_without_watch(patched_container, backend):
    """Test starting a job without following it."""
    backend.submit_sync.return_value = "job-7"
    backend.get_job_status.return_value = make_status("job-7", status="Running")

    result = runner.invoke(app, ["sync", "/mnt/home/file.bin", "nas", "/backup", "--no-watch"])

    assert result.exit_code == 0
    assert "job-7" in result.stdout


def test_sync_watch_updates_progress_bar(patched_container, backend):
    """Test that following a new job feeds every poll to the progress bar."""
    backend.submit_sync.return_value = "job-5"
    backend.get_job_status.side_effect = [
        make_status("job-5", status="Running", progress=50),
        make_status("job-5", status="Completed", progress=100),
    ]

    with mock.patch("sync_client.cli._ProgressBar.update") as bar_update:
        result = runner.invoke(app, ["sync", "/src", "nas", "/"])

    assert result.exit_code == 0
    states = [call.args[0].state for call in bar_update.call_args_list]
    assert states == [JobState.RUNNING, JobState.COMPLETED]


def test_sync_parallel_suggests_chunk_size(patched_container, backend):
    """Test chunk size suggestion for video sources."""
    backend.submit_sync.return_value = "job-8"
    backend.get_job_status.return_value = make_status("job-8", status="Completed", progress=100)

    result = runner.invoke(app, ["sync", "/mnt/home/movie.mkv", "nas", "/", "--parallel"])

    assert result.exit_code == 0
    request = backend.submit_sync.await_args[0][0]
    assert request.use_chunking
    assert request.chunk_size == "32M"


def test_sync_rejects_unknown_chunk_size(patched_container, backend):
    """Test validation of --chunk-size."""
    result = runner.invoke(app, ["sync", "/src", "nas", "/", "--parallel", "--chunk-size", "7M"])

    assert result.exit_code == 2
    backend.submit_sync.assert_not_called()


def test_watch_failed_job_exits_nonzero(patched_container, backend):
    """Test that a failed job ends the watch with exit code 1."""
    backend.get_job_status.return_value = make_status("job-9", status="Failed", progress=30)

    result = runner.invoke(app, ["watch", "job-9"])

    assert result.exit_code == 1


def test_jobs(patched_container, backend):
    """Test listing jobs."""
    backend.list_jobs.return_value = [make_status("job-1", status="Running", progress=12.5)]

    result = runner.invoke(app, ["jobs"])

    assert result.exit_code == 0
    assert "job-1" in result.stdout
    assert "12.5%" in result.stdout


def test_missing_log(patched_container, backend):
    """Test that a missing log is reported and exits 1."""
    backend.get_job_log.side_effect = ResourceNotFoundError("Log file not found")

    result = runner.invoke(app, ["log", "job-1"])

    assert result.exit_code == 1
    assert "No log available for job job-1" in result.output


def test_delete_job(patched_container, backend):
    """Test deleting a job."""
    result = runner.invoke(app, ["delete-job", "job-1"])

    assert result.exit_code == 0
    backend.delete_job.assert_awaited_once_with("job-1")
