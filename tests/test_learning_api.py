from datetime import timedelta

from app.models import UserProgress
from app.utils.time import utcnow

from tests.conftest import auth_headers, make_user

API = "/api/v1"


def complete(client, headers, module_id):
    return client.post(f"{API}/learning/complete", json={"moduleId": module_id}, headers=headers)


def test_completing_a_free_module_grants_catalog_xp(client, user_headers):
    response = complete(client, user_headers, "job-scam")

    assert response.status_code == 200
    body = response.json()
    assert body["xpEarned"] == 15
    assert body["totalXP"] == 15
    assert body["streak"] == 1
    assert body["completedModules"] == ["job-scam"]


def test_completing_twice_is_a_conflict(client, user_headers):
    complete(client, user_headers, "phishing-basics")
    response = complete(client, user_headers, "phishing-basics")

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["details"]["completedModules"] == ["phishing-basics"]

    progress = client.get(f"{API}/learning/progress", headers=user_headers).json()
    assert progress["totalXP"] == 10


def test_unknown_module_is_rejected(client, user_headers):
    response = complete(client, user_headers, "crypto-mining")

    assert response.status_code == 400


def test_premium_module_needs_active_subscription(client, user_headers):
    response = complete(client, user_headers, "financial-fraud")

    assert response.status_code == 403
    assert response.json()["error"]["details"]["requiresPremium"] is True


def test_expired_premium_cannot_open_premium_module(client, db, user, user_headers):
    user.is_premium = True
    user.subscription_plan = "monthly"
    user.subscription_expires_at = utcnow() - timedelta(days=1)
    db.commit()

    response = complete(client, user_headers, "identity-theft")

    assert response.status_code == 403


def test_active_premium_completes_premium_module(client, db, user, user_headers):
    user.is_premium = True
    user.subscription_plan = "annual"
    user.subscription_expires_at = utcnow() + timedelta(days=200)
    db.commit()

    response = complete(client, user_headers, "incident-response")

    assert response.status_code == 200
    assert response.json()["xpEarned"] == 40


def test_progress_is_created_lazily(client, db, user):
    db.delete(user.progress)
    db.commit()

    response = client.get(f"{API}/learning/progress", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["totalXP"] == 0
    assert db.query(UserProgress).filter(UserProgress.user_id == user.id).count() == 1


def test_stats_report_level_band_and_catalog(client, db):
    learner = make_user(db, email="band@example.com", total_xp=750)

    body = client.get(f"{API}/learning/stats", headers=auth_headers(learner)).json()

    assert body["level"] == 2
    assert body["levelProgress"] == 50
    assert body["xpToNextLevel"] == 250
    assert body["totalModules"] == 12
    assert body["access"]["freeModules"] == 5
    assert body["access"]["premiumModules"] == 7
    assert body["access"]["isPremium"] is False


def test_leaderboard_orders_by_xp_with_consecutive_ranks(client, db):
    make_user(db, email="a@example.com", name="Ada", total_xp=300)
    make_user(db, email="b@example.com", name="Bola", total_xp=100)
    make_user(db, email="c@example.com", name="Chidi", total_xp=100)

    body = client.get(f"{API}/learning/leaderboard").json()

    assert [(e["rank"], e["name"], e["totalXP"]) for e in body["leaderboard"]] == [
        (1, "Ada", 300),
        (2, "Bola", 100),
        (3, "Chidi", 100),
    ]
    assert body["totalUsers"] == 3
    assert body["timeframe"] == "all"


def test_leaderboard_week_window_uses_last_activity(client, db):
    recent = make_user(db, email="recent@example.com", name="Recent", total_xp=50)
    stale = make_user(db, email="stale@example.com", name="Stale", total_xp=900)
    recent.progress.last_active_at = utcnow() - timedelta(days=2)
    stale.progress.last_active_at = utcnow() - timedelta(days=20)
    db.commit()

    week = client.get(f"{API}/learning/leaderboard", params={"timeframe": "week"}).json()
    month = client.get(f"{API}/learning/leaderboard", params={"timeframe": "month"}).json()

    assert [e["name"] for e in week["leaderboard"]] == ["Recent"]
    assert [e["name"] for e in month["leaderboard"]] == ["Stale", "Recent"]


def test_leaderboard_rejects_unknown_timeframe_and_clamps_limit(client, db):
    for n in range(3):
        make_user(db, email=f"u{n}@example.com", total_xp=n)

    assert client.get(f"{API}/learning/leaderboard", params={"timeframe": "year"}).status_code == 400
    body = client.get(f"{API}/learning/leaderboard", params={"limit": 0}).json()
    assert len(body["leaderboard"]) == 1
