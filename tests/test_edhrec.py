"""Tests for the EDHREC recommendation client."""

from typing import Any

import httpx
import pytest
import respx

from binderbase.models.failure import NotFoundError, ProviderError
from binderbase.models.recommendations import RecommendationCategory
from binderbase.services.edhrec import (
    COLOR_IDENTITY_KEYS,
    EdhrecClient,
    categorize,
    color_identity_key,
    commander_slug,
)

EDHREC = "https://json.edhrec.com/pages"


def _cardviews(prefix: str, count: int) -> list[dict[str, Any]]:
    return [
        {
            "name": f"{prefix} {i}",
            "sanitized": f"{prefix.lower()}-{i}",
            "url": f"/cards/{prefix.lower()}-{i}",
            "inclusion": 1000 - i,
            "synergy": 0.5,
            "num_decks": 5000 - i,
        }
        for i in range(count)
    ]


@pytest.fixture
def commander_page() -> dict[str, Any]:
    """Trimmed EDHREC commander page."""
    return {
        "header": "Atraxa, Praetors' Voice (Commander)",
        "container": {
            "json_dict": {
                "cardlists": [
                    {"header": "New Cards", "cardviews": _cardviews("New", 3)},
                    {"header": "High Synergy Cards", "cardviews": _cardviews("Synergy", 12)},
                    {"header": "Top Cards", "cardviews": _cardviews("Top", 15)},
                    {"header": "Creatures", "cardviews": _cardviews("Creature", 4)},
                    {"header": "Instants", "cardviews": _cardviews("Instant", 2)},
                    {"header": "Sorceries", "cardviews": _cardviews("Sorcery", 2)},
                    {"header": "Utility Artifacts", "cardviews": _cardviews("Utility", 2)},
                    {"header": "Enchantments", "cardviews": _cardviews("Enchantment", 1)},
                    {"header": "Planeswalkers", "cardviews": _cardviews("Walker", 3)},
                    {"header": "Utility Lands", "cardviews": _cardviews("UtilLand", 2)},
                    {"header": "Mana Artifacts", "cardviews": _cardviews("Rock", 3)},
                    {"header": "Lands", "cardviews": _cardviews("Land", 11)},
                ]
            }
        },
    }


@pytest.fixture
def color_page() -> dict[str, Any]:
    return {
        "container": {
            "json_dict": {
                "cardlists": [
                    {"header": "Top Cards", "cardviews": _cardviews("Top", 25)},
                    {"header": "Other", "cardviews": _cardviews("Other", 5)},
                ]
            }
        }
    }


class TestCommanderSlug:
    def test_punctuation_removed(self) -> None:
        assert commander_slug("Atraxa, Praetors' Voice") == "atraxa-praetors-voice"

    def test_whitespace_runs_collapse(self) -> None:
        assert commander_slug("Edgar   Markov") == "edgar-markov"

    def test_repeated_hyphens_collapse(self) -> None:
        assert commander_slug("Kenrith -- the Returned King") == "kenrith-the-returned-king"

    def test_existing_hyphens_kept(self) -> None:
        assert commander_slug("Yuriko, the Tiger's Shadow") == "yuriko-the-tigers-shadow"
        assert commander_slug("Niv-Mizzet, Parun") == "niv-mizzet-parun"


class TestColorIdentityKey:
    def test_sorted_wubrg(self) -> None:
        assert color_identity_key(["G", "W"]) == "wg"
        assert color_identity_key(["G", "R", "B", "U", "W"]) == "wubrg"
        assert color_identity_key(["R", "U"]) == "ur"

    def test_empty_is_colorless(self) -> None:
        assert color_identity_key([]) == "colorless"

    def test_lowercase_and_duplicates(self) -> None:
        assert color_identity_key(["g", "w", "G"]) == "wg"

    def test_unknown_symbol(self) -> None:
        assert color_identity_key(["W", "X"]) is None

    def test_table_covers_every_combination(self) -> None:
        # 31 non-empty subsets of WUBRG plus colorless
        assert len(COLOR_IDENTITY_KEYS) == 32
        assert COLOR_IDENTITY_KEYS["WUBR"] == "wubr"


class TestCategorize:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Top Cards", RecommendationCategory.TOP_CARDS),
            ("Creatures", RecommendationCategory.CREATURES),
            ("INSTANTS", RecommendationCategory.INSTANTS),
            ("Sorceries", RecommendationCategory.SORCERIES),
            ("Mana Artifacts", RecommendationCategory.ARTIFACTS),
            ("Enchantments", RecommendationCategory.ENCHANTMENTS),
            ("Planeswalkers", RecommendationCategory.PLANESWALKERS),
            ("Utility Lands", RecommendationCategory.LANDS),
            ("New Cards", RecommendationCategory.UNRECOGNIZED),
            ("", RecommendationCategory.UNRECOGNIZED),
        ],
    )
    def test_headers(self, header: str, expected: RecommendationCategory) -> None:
        assert categorize(header) is expected

    def test_first_match_wins(self) -> None:
        """Artifact Creatures are creatures, by table order."""
        assert categorize("Artifact Creatures") is RecommendationCategory.CREATURES


class TestByCommander:
    @respx.mock
    async def test_buckets_card_lists(self, commander_page: dict[str, Any]) -> None:
        route = respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(200, json=commander_page)
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

        assert route.called
        assert recs.slug == "atraxa-praetors-voice"
        assert recs.commander == "Atraxa, Praetors' Voice"
        assert len(recs.buckets[RecommendationCategory.CREATURES]) == 4
        assert len(recs.buckets[RecommendationCategory.SORCERIES]) == 2

    @respx.mock
    async def test_buckets_capped_at_ten(self, commander_page: dict[str, Any]) -> None:
        respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(200, json=commander_page)
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

        top = recs.buckets[RecommendationCategory.TOP_CARDS]
        assert len(top) == 10
        assert top[0].name == "Top 0"
        assert top[0].inclusion == 1000
        assert top[0].synergy == 0.5
        assert top[0].url == "/cards/top-0"

    @respx.mock
    async def test_later_list_replaces_earlier(self, commander_page: dict[str, Any]) -> None:
        respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(200, json=commander_page)
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

        artifacts = recs.buckets[RecommendationCategory.ARTIFACTS]
        assert [e.name for e in artifacts] == ["Rock 0", "Rock 1", "Rock 2"]
        lands = recs.buckets[RecommendationCategory.LANDS]
        assert len(lands) == 10
        assert lands[0].name == "Land 0"

    @respx.mock
    async def test_unrecognized_lists_kept(self, commander_page: dict[str, Any]) -> None:
        respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(200, json=commander_page)
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

        assert set(recs.unrecognized) == {"New Cards", "High Synergy Cards"}
        assert len(recs.unrecognized["High Synergy Cards"]) == 10

        payload = recs.to_dict()
        assert "New Cards" in payload["unrecognized"]
        assert len(payload["top_cards"]) == 10

    @respx.mock
    async def test_missing_cardlists_gives_empty_buckets(self) -> None:
        respx.get(f"{EDHREC}/commanders/nobody.json").mock(
            return_value=httpx.Response(200, json={"container": {}})
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_commander("Nobody")

        assert all(entries == [] for entries in recs.buckets.values())
        assert recs.unrecognized == {}

    @respx.mock
    async def test_unknown_commander_not_found(self) -> None:
        respx.get(f"{EDHREC}/commanders/not-a-commander.json").mock(
            return_value=httpx.Response(404)
        )

        async with httpx.AsyncClient() as http:
            with pytest.raises(NotFoundError, match="Commander not found"):
                await EdhrecClient(http).by_commander("Not a Commander")

    @respx.mock
    async def test_server_error_is_provider_error(self) -> None:
        respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(503)
        )

        async with httpx.AsyncClient() as http:
            with pytest.raises(ProviderError):
                await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

    @respx.mock
    async def test_unreachable_is_provider_error(self) -> None:
        respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        async with httpx.AsyncClient() as http:
            with pytest.raises(ProviderError, match="unreachable"):
                await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

    @respx.mock
    async def test_non_json_body_is_provider_error(self) -> None:
        respx.get(f"{EDHREC}/commanders/atraxa-praetors-voice.json").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        async with httpx.AsyncClient() as http:
            with pytest.raises(ProviderError, match="invalid JSON"):
                await EdhrecClient(http).by_commander("Atraxa, Praetors' Voice")

    async def test_blank_name_not_found_without_request(self) -> None:
        async with httpx.AsyncClient() as http:
            with pytest.raises(NotFoundError):
                await EdhrecClient(http).by_commander("!!!")


class TestByColorIdentity:
    @respx.mock
    async def test_fetches_canonical_key(self, color_page: dict[str, Any]) -> None:
        route = respx.get(f"{EDHREC}/top/wg.json").mock(
            return_value=httpx.Response(200, json=color_page)
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_color_identity(["G", "W"])

        assert route.called
        assert recs.key == "wg"
        assert recs.colors == ("W", "G")

    @respx.mock
    async def test_capped_at_twenty(self, color_page: dict[str, Any]) -> None:
        respx.get(f"{EDHREC}/top/colorless.json").mock(
            return_value=httpx.Response(200, json=color_page)
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_color_identity([])

        assert len(recs.cards) == 20
        assert recs.cards[0].name == "Top 0"
        assert recs.cards[0].num_decks == 5000
        assert recs.cards[0].sanitized == "top-0"

    @respx.mock
    async def test_unknown_colors_fail_soft(self) -> None:
        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_color_identity(["W", "P"])

        assert respx.calls.call_count == 0
        assert recs.key is None
        assert recs.cards == []

    @respx.mock
    async def test_provider_failure_fails_soft(self) -> None:
        respx.get(f"{EDHREC}/top/ub.json").mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_color_identity(["U", "B"])

        assert recs.key == "ub"
        assert recs.cards == []

    @respx.mock
    async def test_non_json_body_fails_soft(self) -> None:
        respx.get(f"{EDHREC}/top/wg.json").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        async with httpx.AsyncClient() as http:
            recs = await EdhrecClient(http).by_color_identity(["W", "G"])

        assert recs.key == "wg"
        assert recs.cards == []
