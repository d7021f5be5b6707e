"""Tests for cloud push/pull against the remote document collection."""
import json

import pytest
from sqlalchemy.exc import OperationalError

from project_tracker import db
from project_tracker.models import RemoteDocument
from project_tracker.services.cloud_service import (
    PULL_FAILED_MESSAGE,
    PUSH_FAILED_MESSAGE,
    CloudSync,
    CloudSyncError,
    RemoteCollection,
    SyncInProgressError,
    get_cloud_sync,
)
from project_tracker.services.project_service import ProjectRepository
from project_tracker.services.storage_service import LocalStore


def _offline(*args, **kwargs):
    raise OperationalError('COMMIT', {}, Exception('remote store unreachable'))


@pytest.fixture
def remote(app):
    return RemoteCollection('test-projects')


class TestRemoteCollection:
    """Tests for RemoteCollection.push_all / pull_all."""

    def test_push_then_pull_returns_same_projects(self, remote, sample_projects):
        message = remote.push_all(sample_projects)
        pulled = remote.pull_all()

        assert message == 'Successfully uploaded 6 project(s) to cloud'
        assert {p.id for p in pulled} == {p.id for p in sample_projects}
        by_id = {p.id: p for p in pulled}
        for project in sample_projects:
            assert by_id[project.id] == project

    def test_push_replaces_remote_collection(self, remote, sample_projects, make_project):
        remote.push_all(sample_projects)
        only = make_project(project_name='Only')

        remote.push_all([only])

        assert [p.id for p in remote.pull_all()] == [only.id]
        assert RemoteDocument.query.filter_by(collection='test-projects').count() == 1

    def test_push_empty_collection(self, remote, sample_projects):
        remote.push_all(sample_projects)
        assert remote.push_all([]) == 'Successfully uploaded 0 project(s) to cloud'
        assert remote.pull_all() == []

    def test_collections_are_independent(self, app, remote, sample_projects):
        remote.push_all(sample_projects)
        assert RemoteCollection('other').pull_all() == []

    def test_failed_push_leaves_remote_unchanged(self, remote, sample_projects,
                                                 make_project, monkeypatch):
        remote.push_all(sample_projects)
        monkeypatch.setattr(db.session(), 'commit', _offline)

        with pytest.raises(CloudSyncError) as exc_info:
            remote.push_all([make_project()])

        monkeypatch.undo()
        assert str(exc_info.value) == PUSH_FAILED_MESSAGE
        assert len(remote.pull_all()) == 6

    def test_failed_pull_raises(self, remote, monkeypatch):
        monkeypatch.setattr(db.session(), 'query', _offline)
        with pytest.raises(CloudSyncError, match=PULL_FAILED_MESSAGE):
            remote.pull_all()

    def test_document_key_becomes_id(self, remote, make_project):
        record = make_project().to_dict()
        record['id'] = 'stale'
        db.session.add(RemoteDocument(
            collection='test-projects', doc_id='doc-1', data=json.dumps(record),
        ))
        db.session.commit()

        assert [p.id for p in remote.pull_all()] == ['doc-1']

    def test_missing_timestamps_default_to_now(self, remote, make_project):
        record = make_project().to_dict()
        del record['createdAt']
        record['updatedAt'] = 'not a timestamp'
        db.session.add(RemoteDocument(
            collection='test-projects', doc_id='doc-1', data=json.dumps(record),
        ))
        db.session.commit()

        project = remote.pull_all()[0]

        assert project.created_at.year >= 2025
        assert project.updated_at >= project.created_at

    def test_unreadable_document_aborts_pull(self, remote, make_project):
        good = make_project()
        db.session.add(RemoteDocument(
            collection='test-projects', doc_id=good.id, data=json.dumps(good.to_dict()),
        ))
        db.session.add(RemoteDocument(
            collection='test-projects', doc_id='broken', data='{not json',
        ))
        db.session.commit()

        with pytest.raises(CloudSyncError, match='broken'):
            remote.pull_all()


class TestCloudSync:
    """Tests for the CloudSync coordinator."""

    def test_pull_replaces_local_collection(self, remote, make_project):
        uploaded = [make_project(project_name='Remote A'), make_project(project_name='Remote B')]
        remote.push_all(uploaded)
        repository = ProjectRepository([make_project(project_name='Local')])

        count = CloudSync(remote).pull(repository)

        assert count == 2
        assert {p.project_name for p in repository.all()} == {'Remote A', 'Remote B'}

    def test_failed_pull_leaves_local_unchanged(self, remote, make_project, monkeypatch):
        local = make_project(project_name='Local')
        repository = ProjectRepository([local])

        def fail():
            raise CloudSyncError(PULL_FAILED_MESSAGE)
        monkeypatch.setattr(remote, 'pull_all', fail)

        with pytest.raises(CloudSyncError):
            CloudSync(remote).pull(repository)
        assert repository.all() == [local]

    def test_malformed_remote_date_leaves_local_unchanged(self, remote, sample_projects):
        """One bad document must not cost the local copy of that project."""
        remote.push_all(sample_projects)
        victim = sample_projects[0]
        document = RemoteDocument.query.filter_by(
            collection='test-projects', doc_id=victim.id,
        ).one()
        data = json.loads(document.data)
        data['asDetails']['date'] = '15/01/2024'
        document.data = json.dumps(data)
        db.session.commit()
        repository = ProjectRepository(sample_projects)

        with pytest.raises(CloudSyncError, match=victim.id):
            CloudSync(remote).pull(repository)

        assert len(repository) == 6
        assert repository.get(victim.id) is not None

    def test_push_uploads_repository(self, remote, sample_projects):
        repository = ProjectRepository(sample_projects)
        message = CloudSync(remote).push(repository)

        assert message == 'Successfully uploaded 6 project(s) to cloud'
        assert len(remote.pull_all()) == 6

    def test_busy_rejects_second_transfer(self, remote):
        sync = CloudSync(remote)
        sync._busy.acquire()
        try:
            assert sync.busy
            with pytest.raises(SyncInProgressError):
                sync.push(ProjectRepository())
            with pytest.raises(SyncInProgressError):
                sync.pull(ProjectRepository())
        finally:
            sync._busy.release()
        assert not sync.busy

    def test_busy_is_released_after_failure(self, remote, monkeypatch):
        sync = CloudSync(remote)

        def fail():
            raise CloudSyncError(PULL_FAILED_MESSAGE)
        monkeypatch.setattr(remote, 'pull_all', fail)

        with pytest.raises(CloudSyncError):
            sync.pull(ProjectRepository())
        assert not sync.busy

    def test_get_cloud_sync_uses_configured_collection(self, app):
        sync = get_cloud_sync()
        assert sync.remote.name == 'test-projects'
        assert get_cloud_sync() is sync

    def test_round_trip_through_application(self, app, repository):
        """Push, delete locally, pull: the collection and the slot are restored."""
        ids = {p.id for p in repository.all()}
        sync = get_cloud_sync()
        sync.push(repository)
        for project_id in list(ids)[:3]:
            repository.delete(project_id)

        sync.pull(repository)

        assert {p.id for p in repository.all()} == ids
        stored = LocalStore(app.config['STORAGE_KEY']).load_all()
        assert {p.id for p in stored} == ids
