from app.models import UserProgress

from tests.conftest import auth_headers, make_user

API = "/api/v1"


def submit(client, headers, answers, module_id="phishing-basics", **extra):
    return client.post(
        f"{API}/quizzes/quiz-{module_id}/submit",
        json={"moduleId": module_id, "answers": answers, **extra},
        headers=headers,
    )


def test_quiz_hides_answers(client, question_bank):
    response = client.get(f"{API}/quizzes/phishing-basics")

    assert response.status_code == 200
    body = response.json()
    assert body["quizId"] == "quiz-phishing-basics"
    assert body["totalQuestions"] == 2
    assert body["passingScore"] == 70
    question = body["questions"][0]
    assert "correctAnswer" not in question
    assert "correctExplanation" not in question


def test_unknown_module_quiz_is_404(client):
    response = client.get(f"{API}/quizzes/no-such-module")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_passing_submission_crosses_level_boundary(client, db, question_bank):
    learner = make_user(db, email="close@example.com", total_xp=485)
    answers = [{"questionId": "pb-1", "selectedOption": 1}, {"questionId": "pb-2", "selectedOption": 1}]

    response = submit(client, auth_headers(learner), answers, timeSpentSeconds=42)

    assert response.status_code == 200
    body = response.json()
    assert body["percentage"] == 100
    assert body["passed"] is True
    assert body["xpEarned"] == 15
    assert body["totalXP"] == 500
    assert body["level"] == 2
    assert body["feedback"][0]["explanation"] == "Right, that is a red flag."

    progress = db.query(UserProgress).filter(UserProgress.user_id == learner.id).one()
    db.refresh(progress)
    assert progress.total_quizzes_attempted == 1
    assert progress.perfect_quizzes == 1
    assert progress.current_streak == 1


def test_failing_submission_records_attempt_without_xp(client, db, user, user_headers, question_bank):
    answers = [{"questionId": "pb-1", "selectedOption": 1}, {"questionId": "pb-2", "selectedOption": 0}]

    body = submit(client, user_headers, answers).json()

    assert body["percentage"] == 50
    assert body["passed"] is False
    assert body["xpEarned"] == 0
    assert body["feedback"][1]["explanation"] == "Check the sender domain."

    history = client.get(f"{API}/quizzes/user/{user.id}/attempts", headers=user_headers).json()
    assert history["totalAttempts"] == 1
    assert history["passRate"] == 0
    assert history["attempts"][0]["quizId"] == "quiz-phishing-basics"


def test_submission_validation(client, user_headers, question_bank):
    bad_option = submit(client, user_headers, [{"questionId": "pb-1", "selectedOption": 4}])
    empty = submit(client, user_headers, [])
    stringly = submit(client, user_headers, [{"questionId": "pb-1", "selectedOption": "1"}])
    negative_time = submit(
        client, user_headers, [{"questionId": "pb-1", "selectedOption": 1}], timeSpentSeconds=-5
    )

    for response in (bad_option, empty, stringly, negative_time):
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_submission_requires_auth(client, question_bank):
    response = submit(client, {}, [{"questionId": "pb-1", "selectedOption": 1}])

    assert response.status_code == 401


def test_module_attempt_summary(client, user, user_headers, question_bank):
    submit(client, user_headers, [{"questionId": "pb-1", "selectedOption": 0}])
    submit(client, user_headers, [{"questionId": "pb-1", "selectedOption": 1}])

    body = client.get(
        f"{API}/quizzes/user/{user.id}/module/phishing-basics", headers=user_headers
    ).json()

    assert body["totalAttempts"] == 2
    assert body["bestScore"] == 100
    assert body["averageScore"] == 50
    assert body["passed"] is True
    assert body["currentAttempt"] == 3


def test_other_users_attempts_are_forbidden(client, db, user, question_bank):
    other = make_user(db, email="other@example.com")

    response = client.get(f"{API}/quizzes/user/{user.id}/attempts", headers=auth_headers(other))

    assert response.status_code == 403


def test_module_stats_for_admin(client, db, admin_headers, user_headers, question_bank):
    second = make_user(db, email="second@example.com")
    submit(client, user_headers, [{"questionId": "pb-1", "selectedOption": 1}])
    submit(client, user_headers, [{"questionId": "pb-1", "selectedOption": 0}])
    submit(client, auth_headers(second), [{"questionId": "pb-1", "selectedOption": 1}])

    body = client.get(f"{API}/quizzes/stats/module/phishing-basics", headers=admin_headers).json()

    assert body["totalAttempts"] == 3
    assert body["uniqueUsers"] == 2
    assert body["passRate"] == 67
    assert body["medianScore"] == 100


def test_module_stats_requires_admin(client, user_headers):
    response = client.get(f"{API}/quizzes/stats/module/phishing-basics", headers=user_headers)

    assert response.status_code == 403


def test_admin_creates_question_once(client, admin_headers):
    payload = {
        "questionId": "js-1",
        "moduleId": "job-scam",
        "questionText": "A recruiter asks for a training fee. What do you do?",
        "options": [{"index": i, "text": f"Choice {i}"} for i in range(4)],
        "correctAnswer": 2,
    }

    first = client.post(f"{API}/quizzes/questions", json=payload, headers=admin_headers)
    second = client.post(f"{API}/quizzes/questions", json=payload, headers=admin_headers)

    assert first.status_code == 201
    assert "correctAnswer" not in first.json()
    assert second.status_code == 409
