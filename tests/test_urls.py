"""Tests for the FFE URL helpers."""

import unittest

from nosjoueurs.ffe import urls

GA_URL = (
    "https://www.echecs.asso.fr/Resultats.aspx?URL=Tournois/Id/68994/68994&Action=Ga"
)


class TournamentUrlTestCase(unittest.TestCase):
    """Test case for the page URL builders."""

    def test_extract_tournament_id(self):
        self.assertEqual(urls.extract_tournament_id(GA_URL), "68994")
        self.assertEqual(
            urls.extract_tournament_id(
                "https://www.echecs.asso.fr/FicheTournoi.aspx?Ref=61234"
            ),
            "61234",
        )
        self.assertIsNone(urls.extract_tournament_id("https://example.com/no-id"))

    def test_page_urls(self):
        base = "https://www.echecs.asso.fr/Resultats.aspx?URL=Tournois/Id/68994/68994"
        self.assertEqual(urls.get_list_url(GA_URL), base + "&Action=Ls")
        self.assertEqual(urls.get_results_url(GA_URL), base + "&Action=Ga")
        self.assertEqual(urls.get_stats_url(GA_URL), base + "&Action=Stats")

    def test_fiche_url_maps_to_results_pages(self):
        fiche = "https://www.echecs.asso.fr/FicheTournoi.aspx?Ref=61234"
        self.assertTrue(
            urls.get_stats_url(fiche).endswith("Id/61234/61234&Action=Stats")
        )

    def test_urls_without_id(self):
        """Test that URLs without an id are kept, only swapping the action."""
        self.assertEqual(
            urls.get_list_url("https://echecs.asso.fr/Tournaments.aspx?Action=Ga&id=x"),
            "https://echecs.asso.fr/Tournaments.aspx?Action=Ls&id=x",
        )
        self.assertEqual(
            urls.get_stats_url("https://example.com/no-id"), "https://example.com/no-id"
        )
        self.assertEqual(
            urls.get_results_url("https://example.com/no-id"),
            "https://example.com/no-id",
        )


class AllowedHostTestCase(unittest.TestCase):
    """Test case for the host allow-list."""

    def test_accepts_federation_hosts(self):
        self.assertTrue(urls.is_allowed_host("https://echecs.asso.fr/page"))
        self.assertTrue(urls.is_allowed_host(GA_URL))

    def test_rejects_lookalikes(self):
        self.assertFalse(urls.is_allowed_host("https://attacker.com/?x=echecs.asso.fr"))
        self.assertFalse(
            urls.is_allowed_host("https://echecs.asso.fr.attacker.com/page")
        )
        self.assertFalse(urls.is_allowed_host("https://evil.com"))
        self.assertFalse(urls.is_allowed_host("https://notechecs.asso.fr/"))

    def test_rejects_other_schemes_and_garbage(self):
        self.assertFalse(urls.is_allowed_host("ftp://echecs.asso.fr/file"))
        self.assertFalse(urls.is_allowed_host("not a url"))
        self.assertFalse(urls.is_allowed_host(""))
        self.assertFalse(urls.is_allowed_host(None))

    def test_is_valid_tournament_url(self):
        self.assertTrue(urls.is_valid_tournament_url(GA_URL))
        self.assertFalse(urls.is_valid_tournament_url("   "))
        self.assertFalse(urls.is_valid_tournament_url("https://evil.com"))


if __name__ == "__main__":
    unittest.main()
