from app.services.games.scoring import format_time, score_for_attempts


def test_score_bounds():
    assert score_for_attempts(0) == 1000
    assert score_for_attempts(2) == 950
    assert score_for_attempts(40) == 0
    assert score_for_attempts(1000) == 0


def test_score_is_non_increasing_and_never_negative():
    scores = [score_for_attempts(a) for a in range(100)]
    assert all(s >= 0 for s in scores)
    assert all(a >= b for a, b in zip(scores, scores[1:]))


def test_custom_base_and_penalty():
    assert score_for_attempts(3, base=500, penalty=100) == 200
    assert score_for_attempts(6, base=500, penalty=100) == 0


def test_format_time():
    assert format_time(0) == '0:00'
    assert format_time(999) == '0:00'
    assert format_time(61000) == '1:01'
    assert format_time(600000) == '10:00'
