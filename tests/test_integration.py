"""Integration tests for the Projects Tracker.

End-to-end workflows across multiple routes and services: create, list,
edit, chart, report and sync, verifying that every view reads the same
collection and that every mutation survives a reload from storage.
"""
import csv
import io

from project_tracker.services.project_service import ProjectRepository
from project_tracker.services.storage_service import LocalStore


def _reload(app) -> ProjectRepository:
    """Simulate a restart: rebuild the repository from the local slot."""
    return ProjectRepository(LocalStore(app.config['STORAGE_KEY']).load_all())


class TestProjectWorkflow:
    """Create -> list -> edit -> dashboard -> report."""

    def test_full_workflow(self, client, app, sample_project_json):
        # Create
        created = client.post('/projects', json=sample_project_json).get_json()['data']
        project_id = created['id']

        # List, filtered to the new project's district
        listing = client.get('/projects?district=Wayanad&sortBy=projectName').get_json()
        assert [p['projectName'] for p in listing['data']] == ['Anganwadi Center', 'Village Office']

        # Edit status and history
        client.put(f'/projects/{project_id}', json={'designStatus': '06 Detailed Design Issued'})
        client.put(f'/projects/{project_id}/history', json={'history': [
            {'event': 'File opened', 'date': '2025-01-02'},
            {'event': 'Drawings issued', 'date': '2025-02-14'},
        ]})

        # Dashboard reflects the new status
        counts = {
            c['status']: c['count']
            for c in client.get('/api/dashboard').get_json()['statusCounts']
        }
        assert counts['06 Detailed Design Issued'] == 2
        assert sum(counts.values()) == 7

        # Report shows the history lines
        report = client.post('/api/reports', json={
            'district': 'Wayanad',
            'selectedColumns': ['projectName', 'projectHistory'],
        }).get_json()['data']
        rows = report['groups'][0]['rows']
        assert rows[1]['cells'][1]['lines'] == [
            '02-01-2025: File opened',
            '14-02-2025: Drawings issued',
        ]

        # Everything survives a reload
        reloaded = _reload(app).get(project_id)
        assert reloaded.design_status.code == '06 Detailed Design Issued'
        assert len(reloaded.history) == 2

    def test_delete_survives_reload(self, client, app):
        project_id = client.get('/projects').get_json()['data'][0]['id']

        client.delete(f'/projects/{project_id}?confirm=true')

        assert _reload(app).get(project_id) is None
        assert len(_reload(app)) == 5


class TestReportViews:
    """The JSON report, HTML preview and CSV export agree."""

    def test_views_share_rows(self, client):
        params = 'groupBy=designStatus&sortBy=designStatus&selectedColumns=projectName'
        report = client.get(f'/reports/preview?{params}').get_data(as_text=True)
        rows = list(csv.reader(io.StringIO(
            client.get(f'/reports/export?{params}').get_data(as_text=True)
        )))

        names = [row[2] for row in rows[1:]]
        assert names[0] == 'School Building Construction'
        for name in names:
            assert name in report


class TestSyncWorkflow:
    """Push, diverge locally, pull back."""

    def test_pull_discards_local_changes(self, client, app, sample_project_json):
        client.post('/sync/push', json={'confirm': True})
        client.post('/projects', json=sample_project_json)
        assert client.get('/projects').get_json()['total'] == 7

        client.post('/sync/pull', json={'confirm': True})

        assert client.get('/projects').get_json()['total'] == 6
        assert len(_reload(app)) == 6
