"""Tests for API endpoints."""

import pytest
import pytest_asyncio
from decimal import Decimal
from httpx import AsyncClient, ASGITransport

from api.main import app
from api.session import forget_cached_trainers, get_trainer
from core.cards import Card, Shoe


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def new_session(client) -> dict[str, str]:
    """Start a session and return the header that identifies it."""
    response = await client.post("/api/game/new")
    return {"X-Session-ID": response.json()["session_id"]}


async def stack_shoe(headers: dict[str, str], *codes: str) -> None:
    """Make the session's engine deal the given cards next."""
    _, trainer = await get_trainer(headers["X-Session-ID"])
    shoe = Shoe(num_decks=1, penetration=1.0)
    shoe._cards = [Card.from_string(code) for code in reversed(codes)]
    trainer.engine.shoe = shoe


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestGame:
    """Tests for /api/game."""

    @pytest.mark.asyncio
    async def test_new_game(self, client):
        response = await client.post("/api/game/new")
        assert response.status_code == 200
        assert "session_id" in response.json()

    @pytest.mark.asyncio
    async def test_initial_state(self, client):
        headers = await new_session(client)
        response = await client.get("/api/game/state", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["phase"] == "BETTING"
        assert data["bankroll"] == 1000.0
        assert data["bet"] == 25
        assert data["player_hand"]["cards"] == []
        assert data["optimal_play"] is None

    @pytest.mark.asyncio
    async def test_missing_session(self, client):
        response = await client.get("/api/game/state")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_forged_session(self, client):
        response = await client.get("/api/game/state", headers={"X-Session-ID": "not-signed"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_deal_hides_hole_card(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")

        response = await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["kind"] == "continuing"
        state = data["state"]
        assert state["phase"] == "PLAYER_TURN"
        assert state["dealer_hand"]["cards"][1] == {
            "rank": None,
            "suit": None,
            "value": None,
            "face_up": False,
        }
        assert state["dealer_hand"]["total"] == 10
        assert state["dealer_upcard"] == 10
        assert state["optimal_play"]["action"] == "HIT"
        assert state["optimal_play"]["hand_type"] == "16"

    @pytest.mark.asyncio
    async def test_wrong_action_is_graded_and_settled(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)

        response = await client.post("/api/game/action", json={"action": "stand"}, headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["kind"] == "complete"
        assert data["check"]["correct"] is False
        assert data["check"]["optimal_action"] == "HIT"
        assert data["check"]["situation"] == "16 vs 10"
        assert data["payout"] == -25.0
        assert data["state"]["result"]["outcome"] == "lose"
        assert data["state"]["bankroll"] == 975.0

    @pytest.mark.asyncio
    async def test_natural_settles_on_deal(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "AS", "9D", "KH", "7C")

        response = await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        data = response.json()
        assert data["kind"] == "complete"
        assert data["payout"] == 37.5
        assert data["state"]["result"]["outcome"] == "blackjack"
        assert data["state"]["bankroll"] == 1037.5

    @pytest.mark.asyncio
    async def test_deal_keeps_last_bet(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        response = await client.post("/api/game/deal", json={}, headers=headers)
        assert response.json()["state"]["bet"] == 25
        assert response.json()["state"]["next_bet"] == 25

    @pytest.mark.asyncio
    async def test_bet_over_table_limit(self, client):
        headers = await new_session(client)
        response = await client.post("/api/game/deal", json={"amount": 501}, headers=headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_positive_bet_is_invalid(self, client):
        headers = await new_session(client)
        response = await client.post("/api/game/deal", json={"amount": 0}, headers=headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_bet_over_bankroll(self, client):
        headers = await new_session(client)
        _, trainer = await get_trainer(headers["X-Session-ID"])
        trainer.bankroll.balance = Decimal("10")

        response = await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Insufficient bankroll"

    @pytest.mark.asyncio
    async def test_action_without_hand(self, client):
        headers = await new_session(client)
        response = await client.post("/api/game/action", json={"action": "hit"}, headers=headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_action(self, client):
        headers = await new_session(client)
        response = await client.post(
            "/api/game/action", json={"action": "surrender"}, headers=headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_split(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "8S", "6D", "8H", "10C", "3C", "KD")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)

        response = await client.post("/api/game/action", json={"action": "split"}, headers=headers)
        data = response.json()
        assert data["kind"] == "split"
        assert data["check"]["correct"] is True
        assert data["check"]["situation"] == "8,8 vs 6"
        assert len(data["state"]["parked_hand"]) == 2
        assert data["state"]["can_split"] is False
        assert data["state"]["optimal_play"]["action"] == "DOUBLE"


class TestModes:
    """Tests for learning and test mode."""

    @pytest.mark.asyncio
    async def test_learning_is_default_and_shows_play(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)

        state = (await client.get("/api/game/state", headers=headers)).json()
        assert state["mode"] == "learning"
        assert state["awaiting_decision"] is True
        assert state["optimal_play"]["action"] == "HIT"

    @pytest.mark.asyncio
    async def test_test_mode_hides_play_until_acted(self, client):
        headers = await new_session(client)
        response = await client.post("/api/game/mode", json={"mode": "test"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["mode"] == "test"

        await stack_shoe(headers, "10S", "10D", "6H", "7C", "2C")
        dealt = (await client.post("/api/game/deal", json={"amount": 25}, headers=headers)).json()
        assert dealt["state"]["awaiting_decision"] is True
        assert dealt["state"]["optimal_play"] is None

        state = (await client.get("/api/game/state", headers=headers)).json()
        assert state["optimal_play"] is None

        hit = (await client.post("/api/game/action", json={"action": "hit"}, headers=headers)).json()
        assert hit["check"]["correct"] is True
        assert hit["check"]["optimal_action"] == "HIT"
        assert hit["check"]["explanation"]
        assert hit["state"]["optimal_play"] is None

        stand = (await client.post("/api/game/action", json={"action": "stand"}, headers=headers)).json()
        assert stand["kind"] == "complete"
        assert stand["check"]["optimal_action"] == "STAND"
        assert stand["state"]["optimal_play"]["action"] == "STAND"

    @pytest.mark.asyncio
    async def test_switching_back_to_learning_reveals_play(self, client):
        headers = await new_session(client)
        await client.post("/api/game/mode", json={"mode": "test"}, headers=headers)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)

        response = await client.post("/api/game/mode", json={"mode": "learning"}, headers=headers)
        assert response.json()["optimal_play"]["action"] == "HIT"

    @pytest.mark.asyncio
    async def test_mode_is_saved_with_session(self, client):
        headers = await new_session(client)
        await client.post("/api/game/mode", json={"mode": "test"}, headers=headers)

        forget_cached_trainers()
        state = (await client.get("/api/game/state", headers=headers)).json()
        assert state["mode"] == "test"

    @pytest.mark.asyncio
    async def test_unknown_mode(self, client):
        headers = await new_session(client)
        response = await client.post("/api/game/mode", json={"mode": "expert"}, headers=headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_mode_needs_session(self, client):
        response = await client.post("/api/game/mode", json={"mode": "test"})
        assert response.status_code == 404


class TestStats:
    """Tests for /api/stats."""

    @pytest.mark.asyncio
    async def test_session_stats_after_decision(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C", "2C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        await client.post("/api/game/action", json={"action": "hit"}, headers=headers)

        response = await client.get("/api/stats/session", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["correct"] == 1
        assert data["total"] == 1
        assert data["accuracy"] == 100

    @pytest.mark.asyncio
    async def test_overall_stats(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        await client.post("/api/game/action", json={"action": "stand"}, headers=headers)

        data = (await client.get("/api/stats/overall", headers=headers)).json()
        assert data["incorrect_decisions"] == 1
        assert data["by_chart"]["hard"] == {"accuracy": 0, "total": 1}
        assert data["missed_situations"][0]["situation"] == "16 vs 10"
        assert data["net_result"] == -25.0

    @pytest.mark.asyncio
    async def test_stats_survive_engine_eviction(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        await client.post("/api/game/action", json={"action": "stand"}, headers=headers)

        forget_cached_trainers()

        stats = (await client.get("/api/stats/session", headers=headers)).json()
        assert stats["total"] == 1
        assert stats["bankroll"] == 975.0
        state = (await client.get("/api/game/state", headers=headers)).json()
        assert state["phase"] == "BETTING"

    @pytest.mark.asyncio
    async def test_trend_neutral(self, client):
        headers = await new_session(client)
        data = (await client.get("/api/stats/trend", headers=headers)).json()
        assert data["trend"] == "neutral"

    @pytest.mark.asyncio
    async def test_session_reset(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        await client.post("/api/game/action", json={"action": "stand"}, headers=headers)

        response = await client.post("/api/stats/session/reset", headers=headers)
        assert response.status_code == 200
        assert response.json()["total"] == 0
        assert response.json()["session_profit"] == 0.0

        overall = (await client.get("/api/stats/overall", headers=headers)).json()
        assert len(overall["recent_sessions"]) == 1
        assert overall["total_decisions"] == 1

    @pytest.mark.asyncio
    async def test_reset_all(self, client):
        headers = await new_session(client)
        await stack_shoe(headers, "10S", "10D", "6H", "7C")
        await client.post("/api/game/deal", json={"amount": 25}, headers=headers)
        await client.post("/api/game/action", json={"action": "stand"}, headers=headers)

        response = await client.post("/api/stats/reset", headers=headers)
        assert response.json() == {"status": "reset"}

        overall = (await client.get("/api/stats/overall", headers=headers)).json()
        assert overall["total_decisions"] == 0
        assert overall["bankroll"] == 1000.0


class TestStrategy:
    """Tests for /api/strategy."""

    @pytest.mark.asyncio
    async def test_chart(self, client):
        response = await client.get("/api/strategy/chart/hard")
        assert response.status_code == 200
        data = response.json()
        assert data["chart"] == "hard"
        assert data["headers"][-1] == "A"
        assert data["rows"][0][0] == "17+"

    @pytest.mark.asyncio
    async def test_unknown_chart(self, client):
        response = await client.get("/api/strategy/chart/surrender")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_lookup(self, client):
        response = await client.post(
            "/api/strategy/lookup", json={"cards": ["8S", "8H"], "dealer_upcard": 6}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["action"] == "SPLIT"
        assert data["short_action"] == "P"
        assert data["chart"] == "pairs"

    @pytest.mark.asyncio
    async def test_lookup_without_split(self, client):
        response = await client.post(
            "/api/strategy/lookup",
            json={"cards": ["8S", "8H"], "dealer_upcard": 6, "can_split": False},
        )
        assert response.json()["action"] == "STAND"

    @pytest.mark.asyncio
    async def test_lookup_bad_card(self, client):
        response = await client.post(
            "/api/strategy/lookup", json={"cards": ["8S", "ZZ"], "dealer_upcard": 6}
        )
        assert response.status_code == 400
