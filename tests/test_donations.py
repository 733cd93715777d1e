"""Tests for the donation ledger: creation, recent donations and export listings."""

import unittest
from datetime import UTC, datetime, timedelta

from app.core.errors import NotFound
from app.schemas.donation import DonationCreate
from app.services.access import scope_for
from app.services.donations import (
    UNKNOWN_DONOR_NAME,
    UNKNOWN_VALUE,
    create_donation,
    donations_with_filters,
    list_donations_for_donor,
    recent_donations,
)
from tests.support import (
    add_admin,
    add_donation,
    add_donor,
    add_province,
    add_user,
    make_session_factory,
)


class TestCreateDonation(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.luanda = add_province(self.db, "Luanda")
        self.leader = add_user(self.db, "lider", self.luanda.id)
        self.donor = add_donor(self.db, "BI-1", self.luanda.id, self.leader.id)

    def tearDown(self) -> None:
        self.db.close()

    def test_records_donation(self) -> None:
        body = DonationCreate(donor_id=self.donor.id, donation_date="2026-05-02", donation_time="10:15")
        donation = create_donation(self.db, body)
        self.assertEqual(donation.notes, "")
        self.assertEqual([d.id for d in list_donations_for_donor(self.db, self.donor.id)], [donation.id])

    def test_unknown_donor_is_rejected(self) -> None:
        body = DonationCreate(donor_id="missing", donation_date="2026-05-02", donation_time="10:15")
        with self.assertRaises(NotFound):
            create_donation(self.db, body)


class TestDonationVisibility(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.luanda = add_province(self.db, "Luanda")
        self.huambo = add_province(self.db, "Huambo")
        self.leader = add_user(self.db, "lider", self.luanda.id)
        self.admin = add_admin(self.db, "admin", self.huambo.id)
        base = datetime.now(UTC) - timedelta(hours=1)
        luanda_donor = add_donor(self.db, "BI-L", self.luanda.id, self.admin.id, "B+")
        huambo_donor = add_donor(self.db, "BI-H", self.huambo.id, self.admin.id)
        self.d1 = add_donation(self.db, luanda_donor.id, "2026-01-10", base)
        self.d2 = add_donation(self.db, huambo_donor.id, "2026-02-10", base + timedelta(minutes=1))
        self.orphan = add_donation(self.db, "deleted-donor", "2026-03-10", base + timedelta(minutes=2))

    def tearDown(self) -> None:
        self.db.close()

    def test_recent_for_leader_is_limited_by_donor_province(self) -> None:
        rows = recent_donations(self.db, scope_for(self.leader))
        self.assertEqual([r.id for r in rows], [self.d1.id])
        self.assertEqual(rows[0].donor_bi_number, "BI-L")
        self.assertEqual(rows[0].blood_type, "B+")

    def test_recent_for_admin_skips_orphans_and_orders_newest_first(self) -> None:
        rows = recent_donations(self.db, scope_for(self.admin))
        self.assertEqual([r.id for r in rows], [self.d2.id, self.d1.id])

    def test_recent_limit(self) -> None:
        rows = recent_donations(self.db, scope_for(self.admin), limit=1)
        self.assertEqual([r.id for r in rows], [self.d2.id])

    def test_export_listing_reports_orphans_as_unknown(self) -> None:
        rows = donations_with_filters(self.db, scope_for(self.admin))
        self.assertEqual([r.id for r in rows], [self.orphan.id, self.d2.id, self.d1.id])
        self.assertEqual(rows[0].donor_name, UNKNOWN_DONOR_NAME)
        self.assertEqual(rows[0].donor_bi_number, UNKNOWN_VALUE)

    def test_export_listing_date_range(self) -> None:
        rows = donations_with_filters(
            self.db, scope_for(self.admin), date_from="2026-02-01", date_to="2026-02-28"
        )
        self.assertEqual([r.id for r in rows], [self.d2.id])

    def test_export_listing_for_leader(self) -> None:
        rows = donations_with_filters(self.db, scope_for(self.leader))
        self.assertEqual([r.id for r in rows], [self.d1.id])


if __name__ == "__main__":
    unittest.main()
