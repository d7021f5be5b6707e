"""Tests for the domain model.

This module contains unit tests for the Project record, its nested
value objects, the DesignStatus enumeration and the district reference
data.
"""
from datetime import date, datetime, timezone

import pytest

from project_tracker.models import (
    ALL_DESIGN_STATUSES,
    DISTRICTS,
    LACS_BY_DISTRICT,
    ARDetails,
    DesignStatus,
    HistoryEntry,
    Project,
    district_for_lac,
    is_valid_lac,
    lacs_for,
)
from project_tracker.models.project import parse_date, parse_timestamp


class TestDesignStatus:
    """Tests for the DesignStatus enumeration."""

    def test_nine_statuses_in_ordinal_order(self):
        """There are nine statuses ordered 1..9."""
        assert len(ALL_DESIGN_STATUSES) == 9
        assert [s.ordinal for s in ALL_DESIGN_STATUSES] == list(range(1, 10))

    def test_code_has_two_digit_prefix(self):
        """The stored code is the zero-padded ordinal plus the label."""
        assert DesignStatus.TENTATIVE_ONGOING.code == '01 Tentative Design Ongoing'
        assert DesignStatus.RETURNED_TO_SITE.code == '09 Returned to Site'

    def test_each_status_has_a_color(self):
        """Every status carries a hex colour."""
        for status in ALL_DESIGN_STATUSES:
            assert status.color.startswith('#')
            assert len(status.color) == 7
        assert DesignStatus.DETAILED_ON_HOLD.color == '#ef4444'

    def test_parse_accepts_code_label_and_name(self):
        """parse() resolves codes, labels, names and members."""
        status = DesignStatus.DETAILED_ISSUED
        assert DesignStatus.parse('06 Detailed Design Issued') is status
        assert DesignStatus.parse('Detailed Design Issued') is status
        assert DesignStatus.parse('DETAILED_ISSUED') is status
        assert DesignStatus.parse(status) is status

    def test_parse_rejects_free_text(self):
        """Anything else is rejected."""
        with pytest.raises(ValueError):
            DesignStatus.parse('In Progress')
        with pytest.raises(ValueError):
            DesignStatus.parse(None)


class TestDistricts:
    """Tests for the district/LAC lookup."""

    def test_six_districts(self):
        assert DISTRICTS == [
            'Kasaragod', 'Kannur', 'Wayanad',
            'Kozhikode', 'Malappuram', 'Palakkad',
        ]

    def test_every_lac_belongs_to_exactly_one_district(self):
        """LAC lists do not overlap and cover LAC numbers 1..60."""
        all_lacs = [lac for d in DISTRICTS for lac in LACS_BY_DISTRICT[d]]
        assert len(all_lacs) == 60
        assert len(set(all_lacs)) == 60
        for district in DISTRICTS:
            assert LACS_BY_DISTRICT[district]
            for lac in LACS_BY_DISTRICT[district]:
                assert district_for_lac(lac) == district

    def test_lacs_for_unknown_district_is_empty(self):
        assert lacs_for('Ernakulam') == []
        assert lacs_for('') == []

    def test_is_valid_lac(self):
        assert is_valid_lac('Kannur', 'Thalassery (LAC No. 13)')
        assert not is_valid_lac('Wayanad', 'Thalassery (LAC No. 13)')
        assert not is_valid_lac('Unknown', 'Thalassery (LAC No. 13)')


class TestParsing:
    """Tests for date and timestamp parsing."""

    def test_parse_date_empty_is_none(self):
        assert parse_date('') is None
        assert parse_date(None) is None

    def test_parse_date_keeps_date_part_of_timestamps(self):
        assert parse_date('2024-01-15') == date(2024, 1, 15)
        assert parse_date('2024-01-15T10:00:00.000Z') == date(2024, 1, 15)

    def test_parse_date_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date('15/01/2024')

    def test_parse_timestamp_handles_zulu_suffix(self):
        """JavaScript toISOString() output is accepted."""
        result = parse_timestamp('2024-12-20T00:00:00.000Z')
        assert result == datetime(2024, 12, 20, tzinfo=timezone.utc)

    def test_parse_timestamp_assumes_utc_for_naive(self):
        result = parse_timestamp('2024-12-20T05:30:00')
        assert result.tzinfo is not None
        assert result.hour == 5


class TestProjectSerialization:
    """Tests for Project.to_dict / from_dict."""

    def test_to_dict_uses_wire_keys(self, make_project):
        project = make_project()
        data = project.to_dict()

        assert data['projectName'] == 'Test Project'
        assert data['asDetails'] == {'status': 'Approved', 'number': 'AS-1', 'date': '2024-01-15'}
        assert data['arDetails']['totalArea'] == '1000 sq.m'
        assert data['contacts']['aeeName'] == 'AEE'
        assert data['designStatus'] == '01 Tentative Design Ongoing'
        assert data['createdAt'].startswith('2024-01-01T00:00:00')

    def test_missing_dates_serialize_as_empty_string(self, make_project):
        project = make_project(ar_details=ARDetails(status='Not Started'))
        assert project.to_dict()['arDetails']['date'] == ''

    def test_from_dict_restores_equal_project(self, make_project):
        project = make_project(history=[
            HistoryEntry(id='h1', event='Drawings sent', date=date(2024, 3, 3)),
        ])
        restored = Project.from_dict(project.to_dict())
        assert restored == project

    def test_from_dict_defaults_missing_history(self, make_project):
        data = make_project().to_dict()
        del data['history']
        assert Project.from_dict(data).history == []

    def test_from_dict_rejects_unknown_status(self, make_project):
        data = make_project().to_dict()
        data['designStatus'] = 'Completed'
        with pytest.raises(ValueError):
            Project.from_dict(data)

    def test_history_entry_gets_id_when_missing(self):
        entry = HistoryEntry.from_dict({'event': 'Visit', 'date': '2024-01-01'})
        assert entry.id
        assert entry.date == date(2024, 1, 1)
