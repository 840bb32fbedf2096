"""Tests for marketer referral links and click tracking."""

import unittest

from support import ServiceTestCase

from luna_ops.exceptions import ReferralNotFound
from luna_ops.models.referrals import ReferralCreate


class TestReferrals(ServiceTestCase):
    def _link(self, marketer_id="mk-7"):
        return self.services.referrals.create_referral_link(
            ReferralCreate(
                destination_url="https://shop.luna.co.ke/products/hand-wash",
                campaign_name="October WhatsApp",
                marketer_id=marketer_id,
                marketer_name="Brian Mwangi",
            )
        )

    def test_code_and_short_url(self):
        link = self._link()
        self.assertRegex(link.code, r"^[0-9a-z]{7}$")
        self.assertEqual(link.short_url, f"https://shop.luna.co.ke/r/{link.code}")
        self.assertEqual(link.click_count, 0)

    def test_track_and_list(self):
        link = self._link()
        self._link(marketer_id="mk-8")
        tracked = self.services.referrals.get_and_track(link.code)
        self.assertEqual(tracked.click_count, 1)
        self.assertEqual(tracked.destination_url, "https://shop.luna.co.ke/products/hand-wash")
        links = self.services.referrals.list_by_marketer("mk-7")
        self.assertEqual([l.code for l in links], [link.code])

    def test_unknown_code(self):
        with self.assertRaises(ReferralNotFound):
            self.services.referrals.get_and_track("0000000")


if __name__ == "__main__":
    unittest.main()
