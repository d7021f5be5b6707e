"""Seed dataset for the Projects Tracker.

Six sample projects, one per district and each in a different design
status. Used when the local slot is empty, unreadable or written in a
legacy schema, and by scripts/reset_db.py.
"""
from datetime import date, datetime, timezone

from project_tracker.models import (
    ARDetails,
    ASDetails,
    Contacts,
    DesignStatus,
    Project,
    generate_id,
)


def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def build_sample_projects() -> list[Project]:
    """Build a fresh copy of the seed dataset with new ids.

    Returns:
        List of six Project instances.
    """
    return [
        Project(
            id=generate_id(),
            project_name='District Hospital Extension',
            district='Kozhikode',
            lac='Kozhikode North (LAC No. 27)',
            as_details=ASDetails('Approved', 'AS-2024-001', date(2024, 1, 15)),
            sr_details='SR issued by Public Works Department on 10th Jan 2024',
            ar_details=ARDetails(
                status='Approved',
                number='AR-2024-045',
                date=date(2024, 2, 20),
                revision_details='R1 - Added emergency wing',
                number_of_floors='4',
                total_area='15000 sq.m',
            ),
            contacts=Contacts(
                'Rajesh Kumar', '9876543210',
                'Priya Menon', '9876543211',
                'ABC Constructions', '9876543212',
            ),
            design_status=DesignStatus.DETAILED_ONGOING,
            created_at=_ts(2024, 1, 10),
            updated_at=_ts(2024, 12, 20),
        ),
        Project(
            id=generate_id(),
            project_name='Panchayat Office Building',
            district='Kannur',
            lac='Thalassery (LAC No. 13)',
            as_details=ASDetails('Pending', 'AS-2024-002', date(2024, 3, 10)),
            sr_details='SR pending from local body',
            ar_details=ARDetails(
                status='Under Review',
                number='AR-2024-078',
                date=date(2024, 4, 15),
                revision_details='Original',
                number_of_floors='2',
                total_area='800 sq.m',
            ),
            contacts=Contacts(
                'Suresh Babu', '9876543220',
                'Anjali Das', '9876543221',
                'Kerala Builders', '9876543222',
            ),
            design_status=DesignStatus.TENTATIVE_ISSUED,
            created_at=_ts(2024, 3, 5),
            updated_at=_ts(2024, 12, 25),
        ),
        Project(
            id=generate_id(),
            project_name='Community Health Center',
            district='Malappuram',
            lac='Manjeri (LAC No. 37)',
            as_details=ASDetails('Approved', 'AS-2024-003', date(2024, 5, 20)),
            sr_details='SR approved by Health Department',
            ar_details=ARDetails(
                status='Issued',
                number='AR-2024-112',
                date=date(2024, 6, 10),
                revision_details='R2 - Modified layout',
                number_of_floors='3',
                total_area='5000 sq.m',
            ),
            contacts=Contacts(
                'Mohammed Ali', '9876543230',
                'Fathima Beevi', '9876543231',
                'Modern Constructions', '9876543232',
            ),
            design_status=DesignStatus.DETAILED_ISSUED,
            created_at=_ts(2024, 5, 15),
            updated_at=_ts(2024, 12, 28),
        ),
        Project(
            id=generate_id(),
            project_name='Anganwadi Center',
            district='Wayanad',
            lac='Kalpetta (LAC No. 19)',
            as_details=ASDetails('Not Started', '', None),
            sr_details='Awaiting SR from Women and Child Development Department',
            ar_details=ARDetails(
                status='Not Started',
                number_of_floors='1',
                total_area='200 sq.m',
            ),
            contacts=Contacts(
                'Thomas George', '9876543240',
                'Mary Joseph', '9876543241',
            ),
            design_status=DesignStatus.FILE_NOT_OPENED,
            created_at=_ts(2024, 7, 1),
            updated_at=_ts(2024, 12, 15),
        ),
        Project(
            id=generate_id(),
            project_name='Police Station Renovation',
            district='Palakkad',
            lac='Palakkad (LAC No. 56)',
            as_details=ASDetails('On Hold', 'AS-2024-004', date(2024, 8, 5)),
            sr_details='SR on hold due to budget constraints',
            ar_details=ARDetails(
                status='On Hold',
                number='AR-2024-145',
                date=date(2024, 9, 12),
                revision_details='Original',
                number_of_floors='2',
                total_area='1200 sq.m',
            ),
            contacts=Contacts(
                'Vinod Kumar', '9876543250',
                'Lakshmi Nair', '9876543251',
                'Supreme Builders', '9876543252',
            ),
            design_status=DesignStatus.DETAILED_ON_HOLD,
            created_at=_ts(2024, 8, 1),
            updated_at=_ts(2024, 12, 10),
        ),
        Project(
            id=generate_id(),
            project_name='School Building Construction',
            district='Kasaragod',
            lac='Kasaragod (LAC No. 2)',
            as_details=ASDetails('Approved', 'AS-2024-005', date(2024, 10, 1)),
            sr_details='SR approved by Education Department',
            ar_details=ARDetails(
                status='In Progress',
                number='AR-2024-178',
                date=date(2024, 11, 5),
                revision_details='Original',
                number_of_floors='3',
                total_area='8000 sq.m',
            ),
            contacts=Contacts(
                'Ashok Pillai', '9876543260',
                'Reshma Das', '9876543261',
                'Excel Constructions', '9876543262',
            ),
            design_status=DesignStatus.TENTATIVE_ONGOING,
            created_at=_ts(2024, 9, 25),
            updated_at=_ts(2024, 12, 30),
        ),
    ]
